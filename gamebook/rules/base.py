from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from gamebook.engine.combat import CombatResolver
from gamebook.engine.types import Node
from gamebook.models.documents import StoryDoc

if TYPE_CHECKING:  # pragma: no cover
    from gamebook.engine.session import Session


class RuleSystem(ABC):
    """A gamebook rule set plugged into a :class:`~gamebook.engine.session.Session`.

    The session calls :meth:`initialize` once with the story document, then
    :meth:`handle_node` for every node the machine reaches and
    :meth:`update_player` for each between-node action the player types.
    """

    name: str = ""
    player_name: str = "You"

    @abstractmethod
    def initialize(self, story: StoryDoc) -> None:
        """Load whatever the rule set needs; raise ``LoadError`` on failure."""

    @abstractmethod
    def make_resolver(self, rng: random.Random) -> CombatResolver:
        """Combat resolver bound to the session's own random source."""

    def handle_node(self, session: "Session", node: Node) -> None:
        session.machine.dispatch(node)

    @abstractmethod
    def update_player(self, session: "Session", action: str) -> str:
        """Apply ``action`` to the session's player and describe the effect.

        Raise :class:`~gamebook.errors.ActionError` when the action is
        unknown or not allowed right now; the player is left untouched.
        """

    def actions(self) -> List[str]:
        return []
