from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..grid.pathfinding import choose_step
from ..grid.tiles import Location, reading_key
from .battlefield import Battlefield

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnAction:
    """What one unit does on its turn.

    ``move_to`` is the single step taken (if any); ``target_id`` is the enemy
    attacked from the unit's final position (if any). Both None means the unit waits.
    """

    unit_id: int
    move_to: Optional[Location] = None
    target_id: Optional[int] = None

    @property
    def idle(self) -> bool:
        return self.move_to is None and self.target_id is None


def decide(battlefield: Battlefield, unit_id: int) -> TurnAction:
    """Work out a unit's turn without changing the battlefield."""
    unit = battlefield.unit(unit_id)
    move_to = None
    if not battlefield.adjacent_enemies(unit):
        move_to = choose_step(battlefield.grid, unit.location, battlefield.in_range_cells(unit))

    position = unit.location if move_to is None else move_to
    enemies = battlefield.adjacent_enemies(unit, position)
    target_id = None
    if enemies:
        target = min(enemies, key=lambda e: (e.hit_points, reading_key(e.location)))
        target_id = target.id
    return TurnAction(unit_id=unit_id, move_to=move_to, target_id=target_id)


def apply_action(battlefield: Battlefield, action: TurnAction) -> bool:
    """Carry out a decided action. Returns True if the attack killed its target."""
    if action.move_to is not None:
        battlefield.move(action.unit_id, action.move_to)
    if action.target_id is not None:
        return battlefield.strike(action.unit_id, action.target_id)
    return False
