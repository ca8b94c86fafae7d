from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .errors import CavernError
from .logging_config import configure_logging
from .outcome import simulate, tune_elf_power
from .parser import parse_map
from .settings import Settings

logger = logging.getLogger(__name__)


def _read_map(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _cmd_outcome(args: argparse.Namespace, settings: Settings) -> int:
    outcome = simulate(_read_map(args.map), elf_power=args.power, settings=settings)
    print(f"score: {outcome.score}")
    print(f"rounds: {outcome.rounds}")
    print(f"winner: {outcome.winner.name.lower()}")
    print(f"hit_points: {outcome.hit_points}")
    return 0


def _cmd_tune(args: argparse.Namespace, settings: Settings) -> int:
    result = tune_elf_power(_read_map(args.map), settings=settings)
    print(f"score: {result.score}")
    print(f"power: {result.power}")
    print(f"rounds: {result.outcome.rounds}")
    print(f"hit_points: {result.outcome.hit_points}")
    return 0


def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    battlefield = parse_map(
        _read_map(args.map),
        hit_points=settings.combat.hit_points,
        attack_power=settings.combat.attack_power,
    )
    print(battlefield.render(with_hit_points=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cavern", description="Goblins vs Elves cave combat simulator")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a settings YAML file to overlay on the defaults.",
    )
    p.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    o = sub.add_parser("outcome", help="Run combat to completion and print its outcome")
    o.add_argument("map", type=Path, help="Path to the cave map")
    o.add_argument("--power", type=int, default=None, help="Elf attack power (default: configured)")
    o.set_defaults(func=_cmd_outcome)

    t = sub.add_parser("tune", help="Find the lowest elf attack power with no elf casualties")
    t.add_argument("map", type=Path, help="Path to the cave map")
    t.set_defaults(func=_cmd_tune)

    r = sub.add_parser("render", help="Print the parsed map with unit hit points")
    r.add_argument("map", type=Path, help="Path to the cave map")
    r.set_defaults(func=_cmd_render)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.WARNING)
    try:
        settings = Settings.load(user_path=args.settings_path)
        return args.func(args, settings)
    except (CavernError, OSError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
