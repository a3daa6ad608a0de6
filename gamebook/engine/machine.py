"""Node traversal state machine.

The machine owns the current node id and moves it through the story graph:

* narrative nodes present choices, gated by :func:`conditions.eligible`;
* encounter nodes fight each enemy in turn and follow ``combat_won``;
* randomized branches draw a d10 and accept the first outcome covering it;
* terminal nodes end the session.

Recoverable structural problems (no choices, no ``combat_won`` outcome, no
outcome for a roll) are reported and routed to the ``game_over`` node. An
unknown node type or a transition to a missing node halts the session.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..errors import StructuralError, TraversalError
from ..logging import get_logger
from .combat import CombatResolver, fight
from .conditions import eligible, first_matching_outcome, missing_requirements
from .player import Player
from .types import (
    COMBAT_WON,
    GAME_OVER,
    EncounterNode,
    NarrativeNode,
    Node,
    RandomBranchNode,
    StoryGraph,
    TerminalNode,
    UnknownNode,
)

log = get_logger(__name__)

COMPLETED = "completed"
HALTED = "halted"


@dataclass
class SessionResult:
    status: str
    node_id: str
    path: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.status == COMPLETED


NodeHandler = Callable[["TraversalMachine", Node], None]


class TraversalMachine:
    def __init__(
        self,
        graph: StoryGraph,
        player: Player,
        resolver: CombatResolver,
        *,
        input_fn: Optional[Callable[[str], str]] = None,
        echo: Callable[[str], None] = print,
        pacing: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        show_status: Optional[Callable[[], None]] = None,
        journal=None,
        node_handler: Optional[NodeHandler] = None,
        max_rounds: int | None = None,
        player_name: str = "You",
    ) -> None:
        self.graph = graph
        self.player = player
        self.resolver = resolver
        self.input_fn = input_fn or input
        self.echo = echo
        self.pacing = pacing
        self.sleep = sleep
        self.show_status = show_status
        self.journal = journal
        self.node_handler = node_handler or TraversalMachine.dispatch
        self.max_rounds = max_rounds
        self.player_name = player_name

        self.current_id = graph.start_id
        self.path: List[str] = []
        self.finished = False
        self._handlers: Dict[type, Callable[[Node], None]] = {
            NarrativeNode: self._handle_narrative,
            EncounterNode: self._handle_encounter,
            RandomBranchNode: self._handle_random,
            TerminalNode: self._handle_terminal,
            UnknownNode: self._handle_unknown,
        }

    # --- public API ------------------------------------------------------
    def current_node(self) -> Node:
        node = self.graph.get(self.current_id)
        if node is None:
            raise TraversalError(f"reached a node id that does not exist: {self.current_id}", self.current_id)
        return node

    def step(self) -> Node:
        """Process the current node once and return it."""
        if self.finished:
            raise StructuralError("session already finished", self.current_id)
        node = self.current_node()
        self.path.append(node.id)
        if node.text:
            self.echo("\n---")
            self.echo(node.text)
            self.echo("---")
        self._log("narration", node=node.id, text=node.text)
        self.node_handler(self, node)
        return node

    def run(self, after_step: Optional[Callable[["TraversalMachine"], None]] = None) -> SessionResult:
        """Step until a terminal node is reached or the session halts."""
        try:
            while not self.finished:
                self.step()
                if not self.finished and after_step is not None:
                    after_step(self)
        except StructuralError as exc:
            self.echo(f"\nError: {exc}")
            log.error("session halted at %s: %s", self.current_id, exc)
            self._log("halt", node=self.current_id, error=str(exc))
            return SessionResult(HALTED, self.current_id, list(self.path), str(exc))
        except EOFError:
            self.echo("\n(Input closed.)")
            return SessionResult(HALTED, self.current_id, list(self.path), "input closed")
        return SessionResult(COMPLETED, self.current_id, list(self.path))

    def dispatch(self, node: Node) -> None:
        handler = self._handlers.get(type(node))
        if handler is None:
            raise StructuralError(f"no handler for node {node.id!r}", node.id)
        handler(node)

    def goto(self, node_id: str) -> None:
        if node_id not in self.graph:
            raise TraversalError(f"reached a node id that does not exist: {node_id}", node_id)
        self.current_id = node_id

    def read_selection(self, count: int, prompt: str = "Choose (number): ") -> int:
        """Prompt until the player enters an integer in ``1..count``."""
        while True:
            raw = self.input_fn(prompt).strip()
            try:
                num = int(raw)
            except ValueError:
                num = 0
            if 1 <= num <= count:
                return num
            self.echo(f"Invalid selection; enter a number from 1 to {count}.")
            self._status()

    # --- node handlers ---------------------------------------------------
    def _handle_narrative(self, node: NarrativeNode) -> None:
        if not node.choices:
            self._route_to_game_over(node, "node has no choices")
            return

        self.echo("\nChoices:")
        for i, choice in enumerate(node.choices, 1):
            req = [r for r in (choice.required_discipline, choice.required_item) if r]
            suffix = f" [requires {' or '.join(req)}]" if req else ""
            self.echo(f"{i}. {choice.description}{suffix}")

        while True:
            num = self.read_selection(len(node.choices))
            choice = node.choices[num - 1]
            if eligible(choice, self.player):
                self._log("choice", node=node.id, choice=num, next=choice.next_node_id)
                self.goto(choice.next_node_id)
                return
            self.echo(f"(You lack: {', '.join(missing_requirements(choice, self.player))})")
            self._status()

    def _handle_encounter(self, node: EncounterNode) -> None:
        self.echo("\n--- Encounter! ---")
        for template in node.enemies:
            enemy = template.spawn()
            result = fight(
                self.player,
                enemy,
                self.resolver,
                echo=self.echo,
                pacing=self.pacing,
                sleep=self.sleep,
                max_rounds=self.max_rounds,
                player_name=self.player_name,
            )
            summary = f"{result.rounds} blows, HP {self.player.hit_points}"
            self._log(
                "encounter",
                node=node.id,
                enemy=enemy.name,
                result="victory" if result.player_won else "defeat",
                enemy_hp=enemy.hit_points,
                summary=summary,
            )
            if not result.player_won:
                self.goto(GAME_OVER)
                return

        won = node.outcome_for(COMBAT_WON)
        if won is None:
            self._route_to_game_over(node, "no combat_won outcome")
            return
        self.goto(won.next_node_id)

    def _handle_random(self, node: RandomBranchNode) -> None:
        roll = self.resolver.roll()
        self.echo(f"Random number: {roll}")
        winner = first_matching_outcome(node.outcomes, roll)
        self._log("roll", node=node.id, roll=roll, next=winner.next_node_id if winner else None)
        if winner is None:
            self._route_to_game_over(node, f"no outcome covers roll {roll}")
            return
        winner_idx = node.outcomes.index(winner) + 1

        self.echo("\nChoices:")
        for i, outcome in enumerate(node.outcomes, 1):
            self.echo(f"{i}. {outcome.description or outcome.next_node_id}")

        while True:
            num = self.read_selection(len(node.outcomes))
            if num == winner_idx:
                self.goto(winner.next_node_id)
                return
            self.echo("That option's condition is not met.")
            self._status()

    def _handle_terminal(self, node: TerminalNode) -> None:
        self.finished = True
        self.echo("\nThe adventure is over.")
        self._log("end", node=node.id)

    def _handle_unknown(self, node: UnknownNode) -> None:
        raise StructuralError(f"unknown node type {node.type_tag!r} at {node.id}", node.id)

    # --- helpers ---------------------------------------------------------
    def _route_to_game_over(self, node: Node, reason: str) -> None:
        self.echo(f"\nError: {reason} ({node.id}); the adventure ends here.")
        log.error("structural error at %s: %s", node.id, reason)
        self._log("structural_error", node=node.id, error=reason)
        self.goto(GAME_OVER)

    def _status(self) -> None:
        if self.show_status is not None:
            self.show_status()

    def _log(self, event_type: str, **data) -> None:
        if self.journal is not None:
            self.journal.log_event(event_type, **data)


__all__ = ["TraversalMachine", "SessionResult", "COMPLETED", "HALTED"]
