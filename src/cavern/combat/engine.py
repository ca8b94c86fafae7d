from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import InvariantViolation, RoundLimitExceeded
from ..settings import EngineSettings
from .battlefield import Battlefield
from .log import CombatLog
from .rules import apply_action, decide
from .units import Faction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundResult:
    """Result of one round.

    completed: every unit alive at round start got its turn.
    winner: set once one faction has no living units left.
    aborted: a unit of the protected faction died and the fight was called off.
    """

    completed: bool
    winner: Optional[Faction] = None
    aborted: bool = False


@dataclass(frozen=True)
class CombatOutcome:
    """Final state of a fight."""

    rounds: int
    winner: Optional[Faction]
    hit_points: int
    elf_power: int
    elf_deaths: int
    aborted: bool
    battlefield: Battlefield

    @property
    def score(self) -> int:
        return self.rounds * self.hit_points


class CombatEngine:
    """Runs reading-order rounds on a battlefield until one faction is wiped out.

    The battlefield is mutated in place; pass a clone to keep the original.
    When ``protect`` is set, the fight aborts the moment a unit of that faction dies.
    """

    def __init__(
        self,
        battlefield: Battlefield,
        settings: EngineSettings | None = None,
        log: CombatLog | None = None,
        protect: Optional[Faction] = None,
    ) -> None:
        self.battlefield = battlefield
        self.settings = settings or EngineSettings()
        self.log = log if log is not None else CombatLog()
        self.protect = protect
        self.rounds_completed = 0

    def run_round(self) -> RoundResult:
        bf = self.battlefield
        round_number = self.rounds_completed + 1
        for unit_id in bf.registry.turn_order():
            unit = bf.unit(unit_id)
            # Units killed earlier this round are skipped before the enemy check.
            if not unit.alive:
                continue
            if not bf.has_enemies(unit.faction):
                return RoundResult(completed=False, winner=unit.faction)

            action = decide(bf, unit_id)
            origin = unit.location
            target = None if action.target_id is None else bf.unit(action.target_id)
            died = apply_action(bf, action)

            if action.move_to is not None:
                self.log.add(
                    "move",
                    f"{unit.faction.name} {unit_id} moves {origin} -> {action.move_to}.",
                    round_number,
                    unit=unit_id,
                    origin=origin,
                    destination=action.move_to,
                )
            if target is not None:
                self.log.add(
                    "attack",
                    f"{unit.faction.name} {unit_id} hits {target.faction.name} {target.id} "
                    f"for {unit.attack_power} (HP now {target.hit_points}).",
                    round_number,
                    attacker=unit_id,
                    defender=target.id,
                    damage=unit.attack_power,
                    hp_after=target.hit_points,
                )
            if died:
                self.log.add(
                    "defeat",
                    f"{target.faction.name} {target.id} at {target.location} was defeated in round {round_number}.",
                    round_number,
                    attacker=unit_id,
                    defender=target.id,
                )
            if self.settings.check_invariants:
                bf.check_invariants()
            if died and target.faction is self.protect:
                return RoundResult(completed=False, aborted=True)

        return RoundResult(completed=True, winner=bf.surviving_faction())

    def run(self) -> CombatOutcome:
        """Play rounds until combat ends (or aborts) and summarise the result."""
        bf = self.battlefield
        if bf.registry.count(Faction.ELF) == 0 and bf.registry.count(Faction.GOBLIN) == 0:
            raise InvariantViolation("Combat needs at least one unit")
        while True:
            max_rounds = self.settings.max_rounds
            if max_rounds is not None and self.rounds_completed >= max_rounds:
                raise RoundLimitExceeded(f"Combat still running after {max_rounds} rounds")
            result = self.run_round()
            if result.completed:
                self.rounds_completed += 1
                self.log.add("round", f"Round {self.rounds_completed} complete.", self.rounds_completed)
            if result.aborted or result.winner is not None:
                break

        winner = None if result.aborted else result.winner
        hit_points = bf.remaining_hit_points(winner) if winner is not None else 0
        elves = [u for u in bf.registry.all_units() if u.faction is Faction.ELF]
        outcome = CombatOutcome(
            rounds=self.rounds_completed,
            winner=winner,
            hit_points=hit_points,
            elf_power=elves[0].attack_power if elves else 0,
            elf_deaths=bf.registry.deaths(Faction.ELF),
            aborted=result.aborted,
            battlefield=bf,
        )
        if outcome.aborted:
            self.log.add("end", f"Combat aborted in round {self.rounds_completed + 1}: an elf died.", self.rounds_completed)
        else:
            self.log.add(
                "end",
                f"Combat ends after {outcome.rounds} full rounds; {winner.name} win with "
                f"{outcome.hit_points} HP left (outcome {outcome.score}).",
                self.rounds_completed,
            )
        return outcome
