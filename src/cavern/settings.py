from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

from .errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "cavern"
USER_SETTINGS_FILE = "settings.yaml"


def user_settings_path() -> Path:
    """Per-user settings file, e.g. ~/.config/cavern/settings.yaml on Linux."""
    return Path(user_config_dir(APP_NAME)) / USER_SETTINGS_FILE


class CombatSettings(BaseModel):
    """Starting stats shared by every unit on the map."""

    hit_points: int = Field(200, gt=0, description="Hit points each unit starts with")
    attack_power: int = Field(3, gt=0, description="Attack power of goblins, and of elves unless tuned")


class TuningSettings(BaseModel):
    """Linear search over elf attack power."""

    baseline_power: int = Field(4, gt=0, description="First elf attack power tried")
    power_step: int = Field(1, gt=0, description="Increase between consecutive trials")


class EngineSettings(BaseModel):
    max_rounds: Optional[int] = Field(None, gt=0, description="Optional safety cap on rounds")
    check_invariants: bool = Field(False, description="Verify grid/registry agreement after every turn")


class Settings(BaseModel):
    combat: CombatSettings = Field(default_factory=CombatSettings)
    tuning: TuningSettings = Field(default_factory=TuningSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Could not parse settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings: {exc}") from exc

    @classmethod
    def load(cls, user_path: Optional[Path] = None, include_user_config: bool = True) -> "Settings":
        """Load packaged defaults, then overlay the per-user file and an explicit file.

        An explicit ``user_path`` that does not exist is reported and ignored.
        """
        try:
            with resources.files("cavern").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to model defaults.")
            data = cls().model_dump()

        overlays = []
        if include_user_config:
            per_user = user_settings_path()
            if per_user.exists():
                overlays.append(per_user)
        if user_path is not None:
            if user_path.exists():
                overlays.append(user_path)
            else:
                logger.warning("Settings file not found: %s", user_path)

        for path in overlays:
            data = cls._deep_merge(data, cls._load_yaml(path))
            logger.info("Loaded settings from %s", path)

        settings = cls.from_dict(data)
        logger.debug("Settings merged: %s", settings)
        return settings
