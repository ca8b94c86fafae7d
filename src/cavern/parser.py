from __future__ import annotations

import logging
from typing import List

from .combat.battlefield import Battlefield
from .combat.registry import UnitRegistry
from .combat.units import Faction
from .errors import MapParseError
from .grid.tiles import Grid

logger = logging.getLogger(__name__)

WALL = "#"
OPEN = "."
UNIT_GLYPHS = {f.glyph: f for f in Faction}


def _rows(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_map(text: str, hit_points: int = 200, attack_power: int = 3) -> Battlefield:
    """Build a battlefield from a text map of ``#``, ``.``, ``G`` and ``E`` glyphs.

    Surrounding whitespace on each row is ignored, as are blank lines. Every unit
    starts with ``hit_points`` and ``attack_power``.

    Raises:
        MapParseError: on an empty map, rows of unequal width or an unknown glyph.
    """
    rows = _rows(text)
    if not rows:
        raise MapParseError("Map is empty")
    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise MapParseError(f"Row {y} has width {len(row)}, expected {width}")

    grid = Grid(width, len(rows))
    registry = UnitRegistry()
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == WALL:
                grid.mark_wall((x, y))
            elif ch == OPEN:
                continue
            elif ch in UNIT_GLYPHS:
                unit = registry.spawn(UNIT_GLYPHS[ch], (x, y), hit_points, attack_power)
                grid.mark_occupied((x, y), unit.id)
            else:
                raise MapParseError(f"Unexpected glyph {ch!r} at row {y}, column {x}")

    battlefield = Battlefield(grid, registry)
    logger.debug("Parsed %r", battlefield)
    return battlefield
