"""
Configuration for the water-radar CLI.

Layers, later ones winning:

    config/default.toml     committed defaults
    config/local.toml       optional, next to the loaded file
    .env                    read into the environment, never overrides it
    WATER_RADAR_* vars      see ``_ENV_OVERRIDES``

Commands get one frozen ``AppConfig`` from ``load_config()`` and read
settings from it.  Scoring constants are not configurable and live in
``water_radar.reference``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from water_radar.taxonomy.water_taxonomy import Profile

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for bundled data."""

    model_config = ConfigDict(frozen=True)

    seed_file: str = "config/seed/waters.json"


class SelectionConfig(BaseModel):
    """Compare-selection and picker defaults."""

    model_config = ConfigDict(frozen=True)

    max_compare: int = 5
    default_profile: str = "Everyday"
    tds_max: float = 2000.0
    rotation_days: int = 7

    @field_validator("default_profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        valid = {p.value for p in Profile}
        if v not in valid:
            raise ValueError(f"default_profile must be one of {sorted(valid)}, got '{v}'.")
        return v

    @field_validator("max_compare")
    @classmethod
    def validate_max_compare(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"max_compare must be at least 2, got {v}.")
        return v

    @field_validator("rotation_days")
    @classmethod
    def validate_rotation_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"rotation_days must be positive, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    selection: SelectionConfig = SelectionConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    @property
    def default_profile(self) -> Profile:
        return Profile(self.selection.default_profile)


# ── Loader ────────────────────────────────────────────────────────────────────

ENV_PREFIX = "WATER_RADAR_"

# Environment variable suffix → (section, key); ``None`` section = top level.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "SEED_FILE":       ("data", "seed_file"),
    "LOG_LEVEL":       ("logging", "level"),
    "LOG_FILE":        ("logging", "log_file"),
    "DEFAULT_PROFILE": ("selection", "default_profile"),
    "MAX_COMPARE":     ("selection", "max_compare"),
    "DEBUG":           (None, "debug"),
}

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def _find_project_root() -> Path:
    """Nearest ancestor of this package holding ``pyproject.toml``."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent


def resolve_path(path: str | Path) -> Path:
    """Anchor a relative config path at the project root."""
    p = Path(path)
    return p if p.is_absolute() else _find_project_root() / p


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build the merged, validated ``AppConfig``.

    Args:
        config_path: TOML file to load.  Defaults to
            ``<project_root>/config/default.toml``.  A ``local.toml`` next
            to it is layered on top when present.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: If the merged values are invalid.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path else root / "config" / "default.toml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local = path.parent / "local.toml"
    if local.exists():
        raw = _deep_merge(raw, _read_toml(local))

    return AppConfig.model_validate(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested tables merge key by key."""
    merged = dict(base)
    for key, val in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(val, dict):
            merged[key] = _deep_merge(current, val)
        else:
            merged[key] = val
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``WATER_RADAR_*`` variables (see ``_ENV_OVERRIDES``) on ``raw``."""
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in raw.items()}
    for suffix, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(ENV_PREFIX + suffix)
        if not value:
            continue
        if key == "debug":
            result["debug"] = value.strip().lower() in _TRUE_STRINGS
        elif section is None:
            result[key] = value
        else:
            result.setdefault(section, {})[key] = value
    return result
