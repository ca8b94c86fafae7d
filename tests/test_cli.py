from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from cavern import cli as cli_module
from cavern import settings as settings_module
from cavern.cli import main

from cave_maps import EXAMPLE_ONE, EXAMPLE_SIX

SRC = Path(__file__).resolve().parents[1] / "src"


@pytest.fixture(autouse=True)
def no_user_config(monkeypatch, tmp_path):
    monkeypatch.setattr(settings_module, "user_settings_path", lambda: tmp_path / "missing.yaml")
    monkeypatch.setattr(cli_module, "configure_logging", lambda level: None)


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "cave.txt"
    p.write_text(text, encoding="utf-8")
    return p


def test_outcome_command(tmp_path, capsys):
    rc = main(["outcome", str(_write(tmp_path, EXAMPLE_ONE))])
    out = capsys.readouterr().out
    assert rc == 0
    assert "score: 36334" in out
    assert "rounds: 37" in out
    assert "winner: elf" in out


def test_outcome_command_with_power(tmp_path, capsys):
    rc = main(["outcome", str(_write(tmp_path, EXAMPLE_SIX)), "--power", "15"])
    assert rc == 0
    assert "score: 4988" in capsys.readouterr().out


def test_tune_command(tmp_path, capsys):
    rc = main(["tune", str(_write(tmp_path, EXAMPLE_SIX))])
    out = capsys.readouterr().out
    assert rc == 0
    assert "score: 4988" in out
    assert "power: 15" in out


def test_render_command(tmp_path, capsys):
    rc = main(["render", str(_write(tmp_path, "#####\n#E.G#\n#####"))])
    assert rc == 0
    assert "#E.G#   E(200), G(200)" in capsys.readouterr().out


def test_settings_override(tmp_path, capsys):
    cfg = tmp_path / "s.yaml"
    cfg.write_text("combat:\n  hit_points: 3\n", encoding="utf-8")
    rc = main(["--settings", str(cfg), "outcome", str(_write(tmp_path, "EG"))])
    assert rc == 0
    assert "score: 3" in capsys.readouterr().out


def test_bad_map_exits_non_zero(tmp_path):
    assert main(["outcome", str(_write(tmp_path, "#X#"))]) == 1


def test_missing_map_exits_non_zero(tmp_path):
    assert main(["outcome", str(tmp_path / "absent.txt")]) == 1


def test_module_entrypoint(tmp_path):
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC) + os.pathsep + env.get("PYTHONPATH", "")
    env["XDG_CONFIG_HOME"] = str(tmp_path)
    cmd = [sys.executable, "-m", "cavern", "outcome", str(_write(tmp_path, EXAMPLE_ONE))]
    proc = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=60)
    assert proc.returncode == 0, proc.stderr
    assert "score: 36334" in proc.stdout
