"""Combat Result Table: ``(roll, combat ratio) -> damage`` lookups."""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Optional

ROLL_MIN, ROLL_MAX = 0, 9
RATIO_MIN, RATIO_MAX = -11, 11


def normalize_ratio(ratio: int) -> int:
    """Clamp a combat ratio into the table's domain ``[-11, 11]``."""
    if ratio <= RATIO_MIN:
        return RATIO_MIN
    if ratio >= RATIO_MAX:
        return RATIO_MAX
    return ratio


@dataclass(frozen=True)
class CombatKey:
    roll: int
    ratio: int


@dataclass(frozen=True)
class DamageOutcome:
    enemy_loss: int = 0
    player_loss: int = 0
    is_killed: bool = False

    def __post_init__(self) -> None:
        if self.enemy_loss < 0 or self.player_loss < 0:
            raise ValueError("damage losses must be non-negative")


ZERO_OUTCOME = DamageOutcome()


class CombatResultTable(Mapping):
    """Read-only mapping of :class:`CombatKey` to :class:`DamageOutcome`.

    Built once per process and shared between encounters; there is no way to
    mutate it after construction.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[CombatKey, DamageOutcome] | None = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, object]]) -> "CombatResultTable":
        """Build a table from ``{RandNum, ComRatio, EnemyLoss, PlayerLoss, IsKilled}`` rows.

        Later rows win when a key is repeated.
        """
        entries: Dict[CombatKey, DamageOutcome] = {}
        for row in rows:
            key = CombatKey(int(row["RandNum"]), int(row["ComRatio"]))
            entries[key] = DamageOutcome(
                enemy_loss=int(row.get("EnemyLoss", 0)),
                player_loss=int(row.get("PlayerLoss", 0)),
                is_killed=bool(row.get("IsKilled", False)),
            )
        return cls(entries)

    def __getitem__(self, key: CombatKey) -> DamageOutcome:
        return self._entries[key]

    def __iter__(self) -> Iterator[CombatKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, roll: int, ratio: int) -> Optional[DamageOutcome]:
        return self._entries.get(CombatKey(roll, ratio))

    def gaps(self) -> list[CombatKey]:
        """Keys of the full ``10 x 23`` domain that the table does not define."""
        return [
            CombatKey(r, c)
            for r in range(ROLL_MIN, ROLL_MAX + 1)
            for c in range(RATIO_MIN, RATIO_MAX + 1)
            if CombatKey(r, c) not in self._entries
        ]

    def __repr__(self) -> str:
        return f"CombatResultTable({len(self)} entries)"
