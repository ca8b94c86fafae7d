from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import InvariantViolation
from ..grid.tiles import Cell, Grid, Location, reading_key
from .registry import UnitRegistry
from .units import Faction, Unit

logger = logging.getLogger(__name__)


class Battlefield:
    """The cave map and its combatants, changed only through this class.

    The grid knows which unit id stands where; the registry owns the units and
    their own location index. Every move and death updates both in one call.
    """

    def __init__(self, grid: Grid, registry: UnitRegistry) -> None:
        self.grid = grid
        self.registry = registry

    # --------------- Queries ---------------

    def unit(self, unit_id: int) -> Unit:
        return self.registry.get(unit_id)

    def has_enemies(self, faction: Faction) -> bool:
        return self.registry.count(faction.enemy) > 0

    def adjacent_enemies(self, unit: Unit, location: Optional[Location] = None) -> List[Unit]:
        """Living enemies orthogonally adjacent to ``location`` (default: the unit's own)."""
        origin = unit.location if location is None else location
        enemies = []
        for n in self.grid.neighbors4(origin):
            other = self.registry.at(n)
            if other is not None and other.faction is not unit.faction:
                enemies.append(other)
        return enemies

    def in_range_cells(self, unit: Unit) -> List[Location]:
        """Open cells next to any living enemy of ``unit``."""
        cells = set()
        for enemy in self.registry.living(unit.faction.enemy):
            cells.update(self.grid.open_neighbors(enemy.location))
        return sorted(cells, key=reading_key)

    def remaining_hit_points(self, faction: Faction) -> int:
        return sum(u.hit_points for u in self.registry.living(faction))

    def surviving_faction(self) -> Optional[Faction]:
        """The only faction left standing, or None while both still fight."""
        elves = self.registry.count(Faction.ELF)
        goblins = self.registry.count(Faction.GOBLIN)
        if elves and not goblins:
            return Faction.ELF
        if goblins and not elves:
            return Faction.GOBLIN
        return None

    # --------------- Mutations ---------------

    def move(self, unit_id: int, destination: Location) -> None:
        unit = self.registry.get(unit_id)
        if destination not in set(self.grid.open_neighbors(unit.location)):
            raise InvariantViolation(f"{unit!r} cannot step to {destination}")
        origin = unit.location
        self.registry.relocate(unit_id, destination)
        self.grid.mark_open(origin)
        self.grid.mark_occupied(destination, unit_id)
        logger.debug("%s moved %s -> %s", unit.faction.name, origin, destination)

    def strike(self, attacker_id: int, defender_id: int) -> bool:
        """Resolve one attack. Returns True if the defender died and was removed."""
        attacker = self.registry.get(attacker_id)
        defender = self.registry.get(defender_id)
        if not defender.alive or defender.faction is attacker.faction:
            raise InvariantViolation(f"{attacker!r} cannot attack {defender!r}")
        if defender.location not in set(self.grid.neighbors4(attacker.location)):
            raise InvariantViolation(f"{defender!r} is not adjacent to {attacker!r}")
        died = defender.take_damage(attacker.attack_power)
        if died:
            self.registry.remove(defender_id)
            self.grid.mark_open(defender.location)
            logger.debug("%s at %s died", defender.faction.name, defender.location)
        return died

    def set_attack_power(self, faction: Faction, power: int) -> None:
        if power <= 0:
            raise ValueError("attack power must be >= 1")
        for unit in self.registry.all_units():
            if unit.faction is faction:
                unit.attack_power = power

    # --------------- Consistency & copies ---------------

    def check_invariants(self) -> None:
        """Raise InvariantViolation unless grid occupancy and the registry agree exactly."""
        occupied = self.grid.occupied_locations()
        registered = self.registry.locations()
        if occupied != registered:
            raise InvariantViolation(f"Grid occupancy {occupied} != registry {registered}")
        for location, unit_id in registered.items():
            unit = self.registry.get(unit_id)
            if unit.location != location or not unit.alive:
                raise InvariantViolation(f"{unit!r} registered at {location}")
            if self.grid.cell_at(location) != Cell.OCCUPIED:
                raise InvariantViolation(f"{location} holds {unit!r} but is not marked occupied")

    def clone(self) -> "Battlefield":
        return Battlefield(self.grid.clone(), self.registry.clone())

    def render(self, with_hit_points: bool = False) -> str:
        rows = self.grid.render(lambda unit_id: self.registry.get(unit_id).faction.glyph)
        if with_hit_points:
            annotated = []
            for y, row in enumerate(rows):
                units = sorted(
                    (u for u in self.registry.living() if u.location[1] == y),
                    key=lambda u: reading_key(u.location),
                )
                if units:
                    row = row + "   " + ", ".join(f"{u.faction.glyph}({u.hit_points})" for u in units)
                annotated.append(row)
            rows = annotated
        return "\n".join(rows)

    def __repr__(self) -> str:
        return (
            f"Battlefield({self.grid.width}x{self.grid.height}, "
            f"elves={self.registry.count(Faction.ELF)}, goblins={self.registry.count(Faction.GOBLIN)})"
        )
