from __future__ import annotations

from typing import Callable, Dict, List

from gamebook.errors import UnknownSystemError
from gamebook.logging import get_logger

from .base import RuleSystem

log = get_logger(__name__)

_REGISTRY: Dict[str, Callable[..., RuleSystem]] = {}


def register_system(name: str) -> Callable[[Callable[..., RuleSystem]], Callable[..., RuleSystem]]:
    """Class decorator: make a rule system constructible by ``name``."""

    def deco(factory: Callable[..., RuleSystem]) -> Callable[..., RuleSystem]:
        key = name.strip().lower()
        if key in _REGISTRY and _REGISTRY[key] is not factory:
            log.warning("rule system %r re-registered", key)
        _REGISTRY[key] = factory
        return factory

    return deco


def get_system(name: str, **options) -> RuleSystem:
    key = (name or "").strip().lower()
    factory = _REGISTRY.get(key)
    if factory is None:
        known = ", ".join(available_systems()) or "none"
        raise UnknownSystemError(f"unknown rule system {name!r} (known: {known})")
    return factory(**options)


def available_systems() -> List[str]:
    return sorted(_REGISTRY)
