from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .combat.engine import CombatEngine, CombatOutcome
from .combat.log import CombatLog
from .combat.units import Faction
from .errors import TuningExhausted
from .parser import parse_map
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TuningResult:
    """Smallest elf attack power that wins without losing a single elf."""

    power: int
    outcome: CombatOutcome
    trials: int

    @property
    def score(self) -> int:
        return self.outcome.score


def simulate(
    text: str,
    elf_power: Optional[int] = None,
    settings: Settings | None = None,
    log: CombatLog | None = None,
) -> CombatOutcome:
    """Run one fight to completion and return its outcome.

    Args:
        text: The cave map.
        elf_power: Elf attack power; defaults to the configured attack power.
        settings: Optional settings; model defaults are used when omitted.
        log: Optional combat log to collect events into.
    """
    settings = settings or Settings()
    battlefield = parse_map(
        text,
        hit_points=settings.combat.hit_points,
        attack_power=settings.combat.attack_power,
    )
    if elf_power is not None:
        battlefield.set_attack_power(Faction.ELF, elf_power)
    engine = CombatEngine(battlefield, settings=settings.engine, log=log)
    return engine.run()


def tune_elf_power(text: str, settings: Settings | None = None) -> TuningResult:
    """Raise elf attack power step by step until the elves win with no casualties.

    Each trial starts from a fresh copy of the parsed map and is abandoned as soon
    as an elf dies. Once the power reaches the elves' hit point total every hit
    kills outright, so a loss at that power means no higher power can succeed.

    Raises:
        TuningExhausted: when even one-hit kills cannot save every elf.
    """
    settings = settings or Settings()
    initial = parse_map(
        text,
        hit_points=settings.combat.hit_points,
        attack_power=settings.combat.attack_power,
    )
    ceiling = max(settings.combat.hit_points, settings.tuning.baseline_power)

    power = settings.tuning.baseline_power
    trials = 0
    while True:
        trials += 1
        battlefield = initial.clone()
        battlefield.set_attack_power(Faction.ELF, power)
        outcome = CombatEngine(battlefield, settings=settings.engine, protect=Faction.ELF).run()
        if outcome.winner is Faction.ELF and outcome.elf_deaths == 0:
            logger.info("Elf power %d wins without losses (outcome %d)", power, outcome.score)
            return TuningResult(power=power, outcome=outcome, trials=trials)
        logger.info("Elf power %d loses an elf; trying higher", power)
        if power >= ceiling:
            raise TuningExhausted(f"Elves lose a unit even at attack power {power}")
        power = min(power + settings.tuning.power_step, ceiling)
