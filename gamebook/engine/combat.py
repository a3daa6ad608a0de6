"""Combat resolution against a Combat Result Table."""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import StructuralError
from ..logging import get_logger
from .crt import ROLL_MAX, ROLL_MIN, ZERO_OUTCOME, CombatKey, CombatResultTable, DamageOutcome, normalize_ratio
from .player import Player
from .types import Enemy

log = get_logger(__name__)

PLAYER_DEFEATED = "player_defeated"
ENEMY_DEFEATED = "enemy_defeated"


@dataclass(frozen=True)
class Blow:
    """One resolution step: the key that was looked up and what it produced."""
    key: CombatKey
    outcome: DamageOutcome
    found: bool = True
    ratio: int = 0  # before clamping


class CombatResolver:
    """Turn a skill differential and a d10 roll into a :class:`DamageOutcome`.

    The table is owned by the resolver and never changes; the random source
    belongs to the session so concurrent sessions do not share state.
    """

    def __init__(self, crt: CombatResultTable, rng: random.Random | None = None) -> None:
        self.crt = crt
        self.rng = rng or random.Random()

    def roll(self) -> int:
        return self.rng.randint(ROLL_MIN, ROLL_MAX)

    def strike(self, player_skill: int, enemy_skill: int, *, forced_roll: int | None = None) -> Blow:
        ratio = player_skill - enemy_skill
        normalized = normalize_ratio(ratio)
        roll = self.roll() if forced_roll is None else int(forced_roll)
        key = CombatKey(roll=roll, ratio=normalized)
        outcome = self.crt.lookup(roll, normalized)
        if outcome is None:
            log.warning("CRT has no entry for roll=%d ratio=%d", roll, normalized)
            return Blow(key=key, outcome=ZERO_OUTCOME, found=False, ratio=ratio)
        return Blow(key=key, outcome=outcome, found=True, ratio=ratio)

    def resolve(self, player_skill: int, enemy_skill: int, *, forced_roll: int | None = None) -> DamageOutcome:
        return self.strike(player_skill, enemy_skill, forced_roll=forced_roll).outcome


def resolve(
    player_skill: int,
    enemy_skill: int,
    rng: random.Random,
    crt: CombatResultTable,
    *,
    forced_roll: int | None = None,
) -> DamageOutcome:
    """Functional form of :meth:`CombatResolver.resolve`."""
    return CombatResolver(crt, rng).resolve(player_skill, enemy_skill, forced_roll=forced_roll)


@dataclass
class FightResult:
    winner: str
    rounds: int
    blows: List[Blow] = field(default_factory=list)

    @property
    def player_won(self) -> bool:
        return self.winner == ENEMY_DEFEATED


def fight(
    player: Player,
    enemy: Enemy,
    resolver: CombatResolver,
    *,
    echo: Callable[[str], None] = print,
    pacing: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
    forced_rolls: Optional[List[int]] = None,
    max_rounds: int | None = None,
    player_name: str = "You",
) -> FightResult:
    """Exchange blows with ``enemy`` until one side drops to 0 HP or below.

    Both sides take their losses before anyone is checked; a player at or
    below 0 loses even when the enemy fell in the same blow.
    """
    rolls = list(forced_rolls or [])
    blows: List[Blow] = []
    while True:
        if max_rounds is not None and len(blows) >= max_rounds:
            raise StructuralError(f"combat with {enemy.name} undecided after {max_rounds} blows")
        echo(f"\n{player_name} (HP:{player.hit_points} CS:{player.combat_skill})")
        echo(f"{enemy.name} (HP:{enemy.hit_points} CS:{enemy.combat_skill})")
        if pacing:
            sleep(pacing)
        echo("You attack!")
        if pacing:
            sleep(pacing * 2)

        blow = resolver.strike(player.combat_skill, enemy.combat_skill, forced_roll=rolls.pop(0) if rolls else None)
        blows.append(blow)
        if not blow.found:
            echo(f"(No combat result for roll {blow.key.roll} at ratio {blow.key.ratio}; no damage dealt.)")
        res = blow.outcome
        enemy.hit_points -= res.enemy_loss
        player.take_damage(res.player_loss)
        echo(f"You deal {res.enemy_loss} damage to {enemy.name} and take {res.player_loss}.")
        if res.is_killed:
            echo("A killing blow!")

        if player.defeated:
            echo("You have fallen!")
            return FightResult(PLAYER_DEFEATED, len(blows), blows)
        if enemy.defeated:
            echo(f"{enemy.name} is defeated!")
            return FightResult(ENEMY_DEFEATED, len(blows), blows)
