from .base import RuleSystem
from .registry import available_systems, get_system, register_system
from . import lonewolf  # noqa: F401  registers "lonewolf"

__all__ = ["RuleSystem", "available_systems", "get_system", "register_system"]
