from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Set

HP = "HP"
CS = "CS"


@dataclass
class Player:
    stats: Dict[str, int] = field(default_factory=dict)
    abilities: Dict[str, bool] = field(default_factory=dict)
    items: Set[str] = field(default_factory=set)
    equipment: Dict[str, str] = field(default_factory=dict)
    # starting stats; healing never raises a stat above these
    base_stats: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.base_stats:
            self.base_stats = dict(self.stats)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> "Player":
        """Build a player from the story document's ``player`` block."""
        data = dict(d or {})
        stats: Dict[str, int] = {}
        for key, value in (data.get("stats") or {}).items():
            try:
                stats[str(key)] = int(value)
            except (TypeError, ValueError):
                continue
        abilities = {
            str(k): bool(v)
            for k, v in (data.get("attributes") or data.get("abilities") or {}).items()
            if isinstance(v, bool)
        }
        items = {str(i) for i in (data.get("inventory") or data.get("items") or [])}
        equipment = {str(k): str(v) for k, v in (data.get("equipment") or {}).items()}
        return cls(stats=stats, abilities=abilities, items=items, equipment=equipment)

    # --- reads -----------------------------------------------------------
    @property
    def hit_points(self) -> int:
        return self.stats.get(HP, 0)

    @property
    def combat_skill(self) -> int:
        return self.stats.get(CS, 0)

    @property
    def defeated(self) -> bool:
        return self.hit_points <= 0

    def has_ability(self, name: str) -> bool:
        return self.abilities.get(name) is True

    def has_item(self, name: str) -> bool:
        return name in self.items

    def active_abilities(self) -> List[str]:
        return sorted(k for k, v in self.abilities.items() if v)

    # --- mutations -------------------------------------------------------
    def take_damage(self, amount: int) -> int:
        self.stats[HP] = self.hit_points - max(0, int(amount))
        return self.stats[HP]

    def restore(self, stat: str, amount: int) -> int:
        """Raise ``stat`` by ``amount`` without passing its starting value."""
        current = self.stats.get(stat, 0)
        cap = self.base_stats.get(stat, current + amount)
        new = min(cap, current + amount) if current < cap else current
        self.stats[stat] = new
        return new - current

    def consume(self, item: str) -> bool:
        if item not in self.items:
            return False
        self.items.discard(item)
        return True

    def add_items(self, names: Iterable[str]) -> None:
        self.items.update(names)
