"""Core engine: combat table, resolver, conditions, traversal machine."""
