from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..grid.tiles import Location

logger = logging.getLogger(__name__)


class Faction(Enum):
    ELF = "E"
    GOBLIN = "G"

    @property
    def glyph(self) -> str:
        return self.value

    @property
    def enemy(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF

    @classmethod
    def from_glyph(cls, glyph: str) -> "Faction":
        return cls(glyph)


@dataclass
class Unit:
    """A combatant on the cave map.

    Attributes:
        id: Stable arena index assigned at parse time.
        faction: Elf or Goblin.
        hit_points: Remaining hit points (floored at 0).
        attack_power: Damage dealt per attack (>= 1).
        location: Current (x, y); kept in step with the grid by the battlefield.
    """

    id: int
    faction: Faction
    hit_points: int
    attack_power: int
    location: Location

    def __post_init__(self) -> None:
        if self.hit_points <= 0:
            raise ValueError("hit_points must be >= 1")
        if self.attack_power <= 0:
            raise ValueError("attack_power must be >= 1")

    @property
    def alive(self) -> bool:
        return self.hit_points > 0

    def take_damage(self, amount: int) -> bool:
        """Apply damage, clamping hit points to zero. Returns True if this blow was fatal."""
        if amount < 0:
            raise ValueError("damage must be non-negative")
        if not self.alive:
            return False
        self.hit_points = max(0, self.hit_points - amount)
        return not self.alive

    def __repr__(self) -> str:
        return f"Unit(id={self.id}, {self.faction.glyph}({self.hit_points}) at {self.location})"
