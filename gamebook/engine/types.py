from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple, Union

GAME_OVER = "game_over"
COMBAT_WON = "combat_won"


@dataclass(frozen=True)
class Choice:
    description: str
    next_node_id: str
    required_discipline: Optional[str] = None
    required_item: Optional[str] = None

    @property
    def gated(self) -> bool:
        return self.required_discipline is not None or self.required_item is not None


@dataclass(frozen=True)
class Outcome:
    next_node_id: str
    description: str = ""
    condition: Optional[str] = None          # e.g. "combat_won"
    condition_int: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class EnemyTemplate:
    """Authored enemy stats; :meth:`spawn` makes the mutable copy an encounter fights."""
    name: str
    hit_points: int
    combat_skill: int

    def spawn(self) -> "Enemy":
        return Enemy(self.name, self.hit_points, self.combat_skill)


@dataclass
class Enemy:
    name: str
    hit_points: int
    combat_skill: int

    @property
    def defeated(self) -> bool:
        return self.hit_points <= 0


@dataclass(frozen=True)
class NarrativeNode:
    id: str
    text: str = ""
    choices: Tuple[Choice, ...] = ()
    kind = "narrative"


@dataclass(frozen=True)
class EncounterNode:
    id: str
    text: str = ""
    enemies: Tuple[EnemyTemplate, ...] = ()
    outcomes: Tuple[Outcome, ...] = ()
    kind = "encounter"

    def outcome_for(self, condition: str) -> Optional[Outcome]:
        for outcome in self.outcomes:
            if outcome.condition == condition:
                return outcome
        return None


@dataclass(frozen=True)
class RandomBranchNode:
    id: str
    text: str = ""
    outcomes: Tuple[Outcome, ...] = ()
    kind = "randomized_branch"


@dataclass(frozen=True)
class TerminalNode:
    id: str
    text: str = ""
    kind = "terminal"


@dataclass(frozen=True)
class UnknownNode:
    """A node whose authored type the engine does not understand."""
    id: str
    text: str = ""
    type_tag: str = ""
    kind = "unknown"


Node = Union[NarrativeNode, EncounterNode, RandomBranchNode, TerminalNode, UnknownNode]

# authored ``type`` strings -> variant
NODE_TYPES = {
    "story": NarrativeNode,
    "narrative": NarrativeNode,
    "encounter": EncounterNode,
    "random_roll": RandomBranchNode,
    "random": RandomBranchNode,
    "randomized_branch": RandomBranchNode,
    "end": TerminalNode,
    "terminal": TerminalNode,
}


@dataclass(frozen=True)
class StoryGraph:
    nodes: Dict[str, Node]
    order: Tuple[str, ...] = field(default=())
    system: Optional[str] = None
    title: str = ""

    @property
    def start_id(self) -> str:
        if self.order:
            return self.order[0]
        return next(iter(self.nodes))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)
