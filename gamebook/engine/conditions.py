"""Gating checks for choices and randomized branches."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .player import Player
from .types import Choice, Outcome


def eligible(choice: Choice, player: Player) -> bool:
    """True when ``player`` may take ``choice``.

    Ungated choices are always open. A gated choice opens when the named
    ability is held or the named item is carried (exact, case-sensitive).
    """
    if not choice.gated:
        return True
    if choice.required_discipline is not None and player.has_ability(choice.required_discipline):
        return True
    if choice.required_item is not None and player.has_item(choice.required_item):
        return True
    return False


def missing_requirements(choice: Choice, player: Player) -> List[str]:
    if eligible(choice, player):
        return []
    return [r for r in (choice.required_discipline, choice.required_item) if r]


def first_matching_outcome(outcomes: Sequence[Outcome], roll: int) -> Optional[Outcome]:
    for outcome in outcomes:
        if roll in outcome.condition_int:
            return outcome
    return None


__all__ = ["eligible", "missing_requirements", "first_matching_outcome"]
