from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, NonNegativeInt, model_validator

from gamebook.engine.player import Player
from gamebook.engine.types import (
    NODE_TYPES,
    Choice,
    EncounterNode,
    EnemyTemplate,
    NarrativeNode,
    Node,
    Outcome,
    RandomBranchNode,
    StoryGraph,
    TerminalNode,
    UnknownNode,
)


class ChoiceDoc(BaseModel):
    description: str = Field("", validation_alias=AliasChoices("description", "text"))
    next_node_id: str
    required_discipline: Optional[str] = None
    required_item: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_conditions(cls, data: Any) -> Any:
        # older stories write gates as ``conditions = {discipline = "...", item = "..."}``
        if isinstance(data, dict) and isinstance(data.get("conditions"), dict):
            data = dict(data)
            cond = data.pop("conditions")
            data.setdefault("required_discipline", cond.get("discipline") or cond.get("ability"))
            data.setdefault("required_item", cond.get("item"))
        return data

    def to_choice(self) -> Choice:
        return Choice(
            description=self.description,
            next_node_id=self.next_node_id,
            required_discipline=self.required_discipline or None,
            required_item=self.required_item or None,
        )


class EnemyDoc(BaseModel):
    name: str = Field(validation_alias=AliasChoices("Name", "name"))
    hp: int = Field(validation_alias=AliasChoices("HP", "hp"))
    cs: int = Field(validation_alias=AliasChoices("CS", "cs"))

    def to_template(self) -> EnemyTemplate:
        return EnemyTemplate(self.name, self.hp, self.cs)


class OutcomeDoc(BaseModel):
    description: str = ""
    condition: Optional[str] = None
    condition_int: List[int] = []
    next_node_id: str

    def to_outcome(self) -> Outcome:
        return Outcome(
            next_node_id=self.next_node_id,
            description=self.description,
            condition=self.condition or None,
            condition_int=frozenset(self.condition_int),
        )


class NodeDoc(BaseModel):
    id: str = Field(min_length=1)
    type: str
    text: str = ""
    choices: List[ChoiceDoc] = []
    enemies: List[EnemyDoc] = []
    outcomes: List[OutcomeDoc] = []

    def to_node(self) -> Node:
        variant = NODE_TYPES.get(self.type.strip().lower())
        if variant is NarrativeNode:
            return NarrativeNode(self.id, self.text, tuple(c.to_choice() for c in self.choices))
        if variant is EncounterNode:
            return EncounterNode(
                self.id,
                self.text,
                tuple(e.to_template() for e in self.enemies),
                tuple(o.to_outcome() for o in self.outcomes),
            )
        if variant is RandomBranchNode:
            return RandomBranchNode(self.id, self.text, tuple(o.to_outcome() for o in self.outcomes))
        if variant is TerminalNode:
            return TerminalNode(self.id, self.text)
        return UnknownNode(self.id, self.text, self.type)


class PlayerDoc(BaseModel):
    stats: Dict[str, int] = {}
    attributes: Dict[str, bool] = {}
    inventory: List[str] = []
    equipment: Dict[str, str] = {}

    def to_player(self) -> Player:
        return Player.from_dict(self.model_dump())


class StoryDoc(BaseModel):
    title: str = ""
    system: Optional[str] = None
    player: PlayerDoc = Field(default_factory=PlayerDoc)
    nodes: List[NodeDoc] = Field(min_length=1)

    def to_graph(self) -> StoryGraph:
        nodes: Dict[str, Node] = {}
        order: List[str] = []
        for doc in self.nodes:
            if doc.id not in nodes:
                order.append(doc.id)
            # a repeated id replaces the earlier node
            nodes[doc.id] = doc.to_node()
        return StoryGraph(nodes=nodes, order=tuple(order), system=self.system, title=self.title)


class CRTRow(BaseModel):
    RandNum: int = Field(ge=0, le=9)
    ComRatio: int = Field(ge=-11, le=11)
    EnemyLoss: NonNegativeInt = 0
    PlayerLoss: NonNegativeInt = 0
    IsKilled: bool = False


class CRTDoc(BaseModel):
    results: List[CRTRow] = Field(min_length=1)


__all__ = [
    "ChoiceDoc",
    "EnemyDoc",
    "OutcomeDoc",
    "NodeDoc",
    "PlayerDoc",
    "StoryDoc",
    "CRTRow",
    "CRTDoc",
]
