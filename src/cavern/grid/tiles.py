from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import InvariantViolation

logger = logging.getLogger(__name__)

Location = Tuple[int, int]

# Up, left, right, down: already in reading order relative to the centre cell.
_OFFSETS: Tuple[Location, ...] = ((0, -1), (-1, 0), (1, 0), (0, 1))


class Cell(IntEnum):
    WALL = 0
    OPEN = 1
    OCCUPIED = 2


def reading_key(location: Location) -> Tuple[int, int]:
    """Sort key for reading order: top-to-bottom, then left-to-right."""
    x, y = location
    return (y, x)


class Grid:
    """A rectangular cave map of walls, open floor and occupied cells.

    Coordinates are (x, y) with (0,0) at top-left; x grows to the right, y grows down.
    Occupied cells store only the id of the unit standing there; the unit itself
    lives in the registry.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid width/height must be > 0")
        self.width = width
        self.height = height
        self._cells: List[List[Cell]] = [[Cell.OPEN for _ in range(width)] for _ in range(height)]
        self._occupants: Dict[Location, int] = {}

    def in_bounds(self, location: Location) -> bool:
        x, y = location
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, location: Location) -> Cell:
        if not self.in_bounds(location):
            raise IndexError(f"Location {location} out of bounds")
        x, y = location
        return self._cells[y][x]

    def is_open(self, location: Location) -> bool:
        return self.in_bounds(location) and self.cell_at(location) == Cell.OPEN

    def occupant_at(self, location: Location) -> Optional[int]:
        return self._occupants.get(location)

    def neighbors4(self, location: Location) -> Iterator[Location]:
        """Yield the in-bounds orthogonal neighbours of ``location`` in reading order."""
        x, y = location
        for dx, dy in _OFFSETS:
            n = (x + dx, y + dy)
            if self.in_bounds(n):
                yield n

    def open_neighbors(self, location: Location) -> Iterator[Location]:
        for n in self.neighbors4(location):
            if self.cell_at(n) == Cell.OPEN:
                yield n

    def mark_wall(self, location: Location) -> None:
        if self.cell_at(location) == Cell.OCCUPIED:
            raise InvariantViolation(f"Cannot wall over occupied cell {location}")
        x, y = location
        self._cells[y][x] = Cell.WALL

    def mark_open(self, location: Location) -> None:
        cell = self.cell_at(location)
        if cell == Cell.WALL:
            raise InvariantViolation(f"Cannot open wall cell {location}")
        x, y = location
        self._cells[y][x] = Cell.OPEN
        self._occupants.pop(location, None)

    def mark_occupied(self, location: Location, unit_id: int) -> None:
        cell = self.cell_at(location)
        if cell != Cell.OPEN:
            raise InvariantViolation(f"Cannot place unit {unit_id} on {cell.name} cell {location}")
        x, y = location
        self._cells[y][x] = Cell.OCCUPIED
        self._occupants[location] = unit_id

    def occupied_locations(self) -> Dict[Location, int]:
        return dict(self._occupants)

    def render(self, glyph_for: Callable[[int], str]) -> List[str]:
        """Return one string per row; ``glyph_for`` maps an occupant id to its glyph."""
        rows = []
        for y in range(self.height):
            chars = []
            for x in range(self.width):
                cell = self._cells[y][x]
                if cell == Cell.WALL:
                    chars.append("#")
                elif cell == Cell.OPEN:
                    chars.append(".")
                else:
                    chars.append(glyph_for(self._occupants[(x, y)]))
            rows.append("".join(chars))
        return rows

    def clone(self) -> "Grid":
        clone = Grid(self.width, self.height)
        clone._cells = [row[:] for row in self._cells]
        clone._occupants = dict(self._occupants)
        return clone

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, occupied={len(self._occupants)})"
