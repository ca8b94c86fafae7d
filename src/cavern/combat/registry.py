from __future__ import annotations

import copy
import logging
from typing import Dict, Iterator, List, Optional

from ..errors import InvariantViolation
from ..grid.tiles import Location, reading_key
from .units import Faction, Unit

logger = logging.getLogger(__name__)


class UnitRegistry:
    """Arena of every unit ever created plus a location index of the living ones.

    Units are never removed from the arena, so ids stay stable and casualties can
    still be counted after the fight. Only living units appear in the location index.
    """

    def __init__(self) -> None:
        self._units: List[Unit] = []
        self._by_location: Dict[Location, int] = {}

    def spawn(self, faction: Faction, location: Location, hit_points: int, attack_power: int) -> Unit:
        if location in self._by_location:
            raise InvariantViolation(f"Location {location} already holds unit {self._by_location[location]}")
        unit = Unit(
            id=len(self._units),
            faction=faction,
            hit_points=hit_points,
            attack_power=attack_power,
            location=location,
        )
        self._units.append(unit)
        self._by_location[location] = unit.id
        return unit

    def get(self, unit_id: int) -> Unit:
        return self._units[unit_id]

    def at(self, location: Location) -> Optional[Unit]:
        unit_id = self._by_location.get(location)
        return None if unit_id is None else self._units[unit_id]

    def relocate(self, unit_id: int, new_location: Location) -> None:
        unit = self._units[unit_id]
        if self._by_location.get(unit.location) != unit_id:
            raise InvariantViolation(f"Unit {unit_id} is not registered at {unit.location}")
        if new_location in self._by_location:
            raise InvariantViolation(f"Location {new_location} already holds unit {self._by_location[new_location]}")
        del self._by_location[unit.location]
        self._by_location[new_location] = unit_id
        unit.location = new_location

    def remove(self, unit_id: int) -> None:
        unit = self._units[unit_id]
        if self._by_location.pop(unit.location, None) != unit_id:
            raise InvariantViolation(f"Unit {unit_id} is not registered at {unit.location}")

    def locations(self) -> Dict[Location, int]:
        return dict(self._by_location)

    def living(self, faction: Optional[Faction] = None) -> Iterator[Unit]:
        for unit_id in self._by_location.values():
            unit = self._units[unit_id]
            if faction is None or unit.faction is faction:
                yield unit

    def count(self, faction: Faction) -> int:
        return sum(1 for _ in self.living(faction))

    def deaths(self, faction: Faction) -> int:
        return sum(1 for u in self._units if u.faction is faction and not u.alive)

    def turn_order(self) -> List[int]:
        """Ids of living units sorted by the reading order of their location."""
        return [self._by_location[loc] for loc in sorted(self._by_location, key=reading_key)]

    def all_units(self) -> List[Unit]:
        return list(self._units)

    def clone(self) -> "UnitRegistry":
        clone = UnitRegistry()
        clone._units = [copy.copy(u) for u in self._units]
        clone._by_location = dict(self._by_location)
        return clone

    def __len__(self) -> int:
        return len(self._by_location)
