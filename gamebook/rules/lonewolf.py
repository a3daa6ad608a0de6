"""Lone Wolf rules: CRT combat, Kai disciplines and meals."""
from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from gamebook.engine.combat import CombatResolver
from gamebook.engine.config import find_crt
from gamebook.engine.crt import CombatResultTable
from gamebook.engine.player import CS, HP
from gamebook.engine.types import EncounterNode, Node
from gamebook.errors import ActionError, LoadError
from gamebook.logging import get_logger
from gamebook.models.documents import StoryDoc
from gamebook.validation import load_crt

from .base import RuleSystem
from .registry import register_system

if TYPE_CHECKING:  # pragma: no cover
    from gamebook.engine.session import Session

log = get_logger(__name__)

MEAL_ITEM = "Meal"
MEAL_STAT = "MEAL"
HEALING = "Healing"
MINDBLAST = "Mindblast"
MINDBLAST_BONUS = 2


@register_system("lonewolf")
class LoneWolfSystem(RuleSystem):
    name = "lonewolf"
    player_name = "Lone Wolf"

    def __init__(
        self,
        crt_path: str | Path | None = None,
        crt: CombatResultTable | None = None,
        story_file: str | Path | None = None,
    ) -> None:
        self.crt_path = Path(crt_path) if crt_path is not None else None
        self.story_file = Path(story_file) if story_file is not None else None
        self.crt: Optional[CombatResultTable] = crt
        self._healed_at: Optional[str] = None

    def initialize(self, story: StoryDoc) -> None:
        if self.crt is not None:
            return
        path = find_crt(self.story_file, self.crt_path)
        self.crt = load_crt(path)
        gaps = len(self.crt.gaps())
        if gaps:
            log.warning("combat table %s leaves %d keys undefined", path, gaps)
        log.info("Lone Wolf CRT loaded from %s (%d entries)", path, len(self.crt))

    def make_resolver(self, rng: random.Random) -> CombatResolver:
        if self.crt is None:
            raise LoadError("Lone Wolf rules used before initialize()")
        return CombatResolver(self.crt, rng)

    def handle_node(self, session: "Session", node: Node) -> None:
        player = session.player
        if isinstance(node, EncounterNode) and player.has_ability(MINDBLAST):
            session.echo(f"(Mindblast: +{MINDBLAST_BONUS} combat skill)")
            player.stats[CS] = player.combat_skill + MINDBLAST_BONUS
            try:
                session.machine.dispatch(node)
            finally:
                player.stats[CS] = player.combat_skill - MINDBLAST_BONUS
            return
        session.machine.dispatch(node)

    def update_player(self, session: "Session", action: str) -> str:
        player = session.player
        here = session.machine.current_id
        if action == "eat_meal":
            if player.consume(MEAL_ITEM):
                pass
            elif player.stats.get(MEAL_STAT, 0) > 0:
                player.stats[MEAL_STAT] -= 1
            else:
                raise ActionError("you have no meal to eat")
            gained = player.restore(HP, 1)
            return f"You eat a meal and recover {gained} HP."
        if action == "heal":
            if not player.has_ability(HEALING):
                raise ActionError("you do not have the Healing discipline")
            if self._healed_at == here:
                raise ActionError("you have already used Healing here")
            gained = player.restore(HP, 1)
            self._healed_at = here
            if not gained:
                return "You are already at full strength."
            return f"Healing restores {gained} HP."
        raise ActionError(f"unknown action {action!r}")

    def actions(self) -> List[str]:
        return ["eat_meal", "heal"]
