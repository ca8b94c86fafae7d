"""
Combat package for the cave simulator.

Contains:
- Units, the unit arena/registry and the battlefield that keeps them in step with the grid.
- Turn rules: decide a unit's move and attack, then apply it.
- The round engine and an in-memory combat log.
"""

from .units import Faction, Unit
from .registry import UnitRegistry
from .battlefield import Battlefield
from .rules import TurnAction, apply_action, decide
from .log import CombatEvent, CombatLog
from .engine import CombatEngine, CombatOutcome, RoundResult

__all__ = [
    "Faction",
    "Unit",
    "UnitRegistry",
    "Battlefield",
    "TurnAction",
    "decide",
    "apply_action",
    "CombatEvent",
    "CombatLog",
    "CombatEngine",
    "CombatOutcome",
    "RoundResult",
]
