from __future__ import annotations


class GamebookError(Exception):
    """Base class for every error raised by the engine."""


class LoadError(GamebookError):
    """A story or combat table document could not be read or validated."""

    def __init__(self, message: str, path: object | None = None) -> None:
        self.path = path
        super().__init__(message)


class StructuralError(GamebookError):
    """The story graph cannot be walked any further from the current node."""

    def __init__(self, message: str, node_id: str | None = None) -> None:
        self.node_id = node_id
        super().__init__(message)


class TraversalError(StructuralError):
    """A transition names a node id that is not in the graph."""


class UnknownSystemError(GamebookError):
    pass


class ActionError(GamebookError):
    """A between-node player action was rejected."""


__all__ = [
    "GamebookError",
    "LoadError",
    "StructuralError",
    "TraversalError",
    "UnknownSystemError",
    "ActionError",
]
