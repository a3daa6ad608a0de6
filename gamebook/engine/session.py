"""One play-through: story graph + player + rule system + traversal machine."""
from __future__ import annotations

import random
import time
from pathlib import Path
from typing import Callable, Optional

from gamebook.errors import ActionError
from gamebook.models.documents import StoryDoc
from gamebook.rules import RuleSystem, get_system
from gamebook.sheet import render_status

from .config import get_system_name
from .machine import SessionResult, TraversalMachine
from .player import Player
from .types import GAME_OVER, StoryGraph

ACTION_PROMPT = "Action (e.g. heal, eat_meal, status, skip): "
SKIP = "skip"
STATUS = "status"


class Session:
    def __init__(
        self,
        graph: StoryGraph,
        player: Player,
        system: RuleSystem,
        *,
        rng: random.Random | None = None,
        input_fn: Optional[Callable[[str], str]] = None,
        echo: Callable[[str], None] = print,
        pacing: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        journal=None,
        max_rounds: int | None = None,
        action_prompt: bool = True,
    ) -> None:
        self.graph = graph
        self.player = player
        self.system = system
        self.rng = rng or random.Random()
        self.input_fn = input_fn or input
        self.echo = echo
        self.journal = journal
        self.action_prompt = action_prompt
        self.machine = TraversalMachine(
            graph,
            player,
            system.make_resolver(self.rng),
            input_fn=self.input_fn,
            echo=echo,
            pacing=pacing,
            sleep=sleep,
            show_status=self.show_status,
            journal=journal,
            node_handler=lambda _machine, node: self.system.handle_node(self, node),
            max_rounds=max_rounds,
            player_name=system.player_name,
        )

    @classmethod
    def from_story(
        cls,
        story: StoryDoc,
        system: RuleSystem | None = None,
        *,
        system_name: str | None = None,
        story_file: str | Path | None = None,
        crt_path: str | Path | None = None,
        seed: int | None = None,
        **kwargs,
    ) -> "Session":
        """Build a session from a loaded story document.

        The rule system comes from ``system`` or else the registry, keyed by
        ``system_name``, the story's own ``system`` field or the configured
        default. ``initialize`` runs here, so a bad combat table fails before
        the first node is shown.
        """
        if system is None:
            name = get_system_name(story.system, system_name)
            options = {}
            if crt_path is not None:
                options["crt_path"] = crt_path
            if story_file is not None:
                options["story_file"] = story_file
            system = get_system(name, **options)
        system.initialize(story)
        rng = kwargs.pop("rng", None) or random.Random(seed)
        return cls(story.to_graph(), story.player.to_player(), system, rng=rng, **kwargs)

    def show_status(self) -> None:
        self.echo(render_status(self.player, title=self.system.player_name))

    def prompt_action(self, _machine: Optional[TraversalMachine] = None) -> None:
        """Ask for one between-node action; ``skip`` (or nothing) moves on."""
        if not self.action_prompt:
            return
        # a fallen player or a story that ended in game_over gets no more turns
        if self.player.defeated or self.machine.current_id == GAME_OVER:
            return
        while True:
            action = self.input_fn(ACTION_PROMPT).strip()
            if not action or action == SKIP:
                return
            if action == STATUS:
                self.show_status()
                continue
            try:
                message = self.system.update_player(self, action)
            except ActionError as e:
                self.echo(f"Action error: {e}")
                self._log_action(action, f"rejected: {e}")
                continue
            self.echo(message)
            self._log_action(action, message)
            return

    def run(self) -> SessionResult:
        return self.machine.run(after_step=self.prompt_action)

    def _log_action(self, action: str, result: str) -> None:
        if self.journal is not None:
            self.journal.log_event("action", action=action, result=result)
