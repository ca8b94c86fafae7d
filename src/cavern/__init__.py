"""
Cavern: a deterministic Goblins vs Elves grid combat simulator.

Contains:
- A grid model with reading-order helpers and a tie-break-correct BFS.
- A unit arena, battlefield and turn engine that resolve combat round by round.
- An outcome driver that scores a fight and tunes the elves' attack power.
"""

__version__ = "0.1.0"

from .outcome import TuningResult, simulate, tune_elf_power

__all__ = [
    "__version__",
    "TuningResult",
    "simulate",
    "tune_elf_power",
]
