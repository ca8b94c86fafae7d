from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, List, Optional

from .tiles import Grid, Location, reading_key

logger = logging.getLogger(__name__)


class DistanceField:
    """Step counts from a single source over open cells; ``None`` means unreachable."""

    def __init__(self, source: Location, distances: List[List[Optional[int]]]) -> None:
        self.source = source
        self._distances = distances

    def get(self, location: Location) -> Optional[int]:
        x, y = location
        if not (0 <= y < len(self._distances) and 0 <= x < len(self._distances[y])):
            return None
        return self._distances[y][x]

    def reachable(self, location: Location) -> bool:
        return self.get(location) is not None

    def __repr__(self) -> str:
        return f"DistanceField(source={self.source})"


def distance_field(grid: Grid, source: Location) -> DistanceField:
    """Breadth-first search from ``source`` over OPEN cells, 4-directional.

    The source itself gets distance 0 even when a unit stands on it.
    """
    distances: List[List[Optional[int]]] = [[None] * grid.width for _ in range(grid.height)]
    sx, sy = source
    distances[sy][sx] = 0
    q = deque([source])
    while q:
        current = q.popleft()
        cx, cy = current
        d = distances[cy][cx]
        for nx, ny in grid.open_neighbors(current):
            if distances[ny][nx] is None:
                distances[ny][nx] = d + 1
                q.append((nx, ny))
    return DistanceField(source, distances)


def first_step(grid: Grid, unit_location: Location, target: Location) -> Optional[Location]:
    """Return the open neighbour of ``unit_location`` that starts a shortest path to ``target``.

    Distances are measured FROM the target, so each candidate step is ranked by its
    own remaining distance; ties go to the earliest step in reading order.
    """
    field = distance_field(grid, target)
    ranked = [
        (field.get(step), reading_key(step), step)
        for step in grid.open_neighbors(unit_location)
        if field.reachable(step)
    ]
    if not ranked:
        return None
    return min(ranked)[2]


def choose_step(grid: Grid, unit_location: Location, in_range: Iterable[Location]) -> Optional[Location]:
    """Pick the single step a unit takes toward the nearest reachable in-range cell.

    The destination is the reachable candidate with the smallest (distance, reading order);
    the step toward it is then resolved independently by :func:`first_step`.
    Returns ``None`` when no candidate is reachable.
    """
    field = distance_field(grid, unit_location)
    ranked = [
        (field.get(cell), reading_key(cell), cell)
        for cell in set(in_range)
        if field.reachable(cell)
    ]
    if not ranked:
        return None
    distance, _, destination = min(ranked)
    logger.debug("Unit at %s heads for %s (%d steps)", unit_location, destination, distance)
    return first_step(grid, unit_location, destination)
