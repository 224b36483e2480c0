"""Configuration models and helpers for SeerEngine settings."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..decision.engine import CONFIDENCE_FLOOR, QuestionMode
from ..exceptions import ConfigError
from ..geometry.aspects import NATAL_ORBS, SYNASTRY_ORBS, TRANSIT_ORBS, AspectType, OrbTable

LOG = logging.getLogger(__name__)

__all__ = [
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "CacheCfg",
    "DecisionCfg",
    "EphemerisCfg",
    "LoggingCfg",
    "OrbsCfg",
    "Settings",
    "config_path",
    "default_settings",
    "ensure_default_config",
    "get_config_home",
    "load_settings",
    "save_settings",
]

CURRENT_SETTINGS_SCHEMA_VERSION = 2
CONFIG_FILENAME = "config.yaml"
MAX_ORB_DEG = 15.0

# -------------------- Settings Schema --------------------


class EphemerisCfg(BaseModel):
    """Longitude provider selection."""

    provider: Literal["closed_form", "swiss"] = "closed_form"
    include_chiron: bool = True


def _cap_orbs(value: Dict[str, float]) -> Dict[str, float]:
    capped: Dict[str, float] = {}
    for key, orb in dict(value).items():
        aspect = AspectType(key)
        capped[aspect.value] = max(0.0, min(MAX_ORB_DEG, float(orb)))
    return capped


class OrbsCfg(BaseModel):
    """Maximum orbs per aspect for each comparison kind."""

    natal: Dict[str, float] = Field(default_factory=NATAL_ORBS.as_dict)
    transit: Dict[str, float] = Field(default_factory=TRANSIT_ORBS.as_dict)
    synastry: Dict[str, float] = Field(default_factory=SYNASTRY_ORBS.as_dict)

    @field_validator("natal", "transit", "synastry", mode="before")
    @classmethod
    def _cap(cls, value: Dict[str, float]) -> Dict[str, float]:
        return _cap_orbs(value)

    def table(self, name: Literal["natal", "transit", "synastry"]) -> OrbTable:
        """Return the named orb table as an engine :class:`OrbTable`."""

        return OrbTable.from_mapping(name, getattr(self, name))


class DecisionCfg(BaseModel):
    """Question decision tuning."""

    confidence_floor: float = CONFIDENCE_FLOOR
    default_mode: Literal["yes_no", "guidance"] = QuestionMode.YES_NO.value

    @field_validator("confidence_floor", mode="before")
    @classmethod
    def _cap_floor(cls, value: float) -> float:
        return max(0.0, min(1.0, float(value)))


class CacheCfg(BaseModel):
    """In-memory natal chart cache."""

    enabled: bool = True
    max_entries: Optional[int] = Field(default=256, ge=1)


class LoggingCfg(BaseModel):
    """Default logging level used by entry points when ``LOG_LEVEL`` is unset."""

    level: str = "INFO"


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    orbs: OrbsCfg = Field(default_factory=OrbsCfg)
    decision: DecisionCfg = Field(default_factory=DecisionCfg)
    cache: CacheCfg = Field(default_factory=CacheCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("SEERENGINE_HOME", str(Path.home() / ".seerengine")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(mode="json")
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _coerce_schema_version(raw: object) -> int:
    """Return a normalised schema version value with sane bounds."""

    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def _upgrade_settings_payload(
    data: dict[str, object], *, schema_version: int
) -> tuple[dict[str, object], bool]:
    """Apply upgrades required for older settings payloads."""

    upgraded = deepcopy(data)
    version = max(1, schema_version)
    changed = False

    if version < 2:
        # v1 stored a single flat orb table under ``orbs``; it becomes the natal table.
        orbs = upgraded.get("orbs")
        if isinstance(orbs, dict) and orbs and all(not isinstance(v, dict) for v in orbs.values()):
            upgraded["orbs"] = {"natal": orbs}
        version = 2
        changed = True

    if upgraded.get("schema_version") != version:
        upgraded["schema_version"] = version
        changed = True

    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing.

    Raises
    ------
    ConfigError
        When the file is not valid YAML or does not describe valid settings.
    """

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    try:
        with source_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"could not parse {source_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{source_path} must contain a mapping, got {type(raw).__name__}")
    schema_version = _coerce_schema_version(raw.get("schema_version"))
    data, upgraded = _upgrade_settings_payload(raw, schema_version=schema_version)
    try:
        settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings in {source_path}: {exc}") from exc
    if upgraded:
        LOG.info("Upgraded settings at %s to schema v%d", source_path, settings.schema_version)
        save_settings(settings, source_path)
    return settings


def ensure_default_config() -> Path:
    """Ensure a configuration file exists on disk and return its path."""

    target = config_path()
    if not target.exists():
        save_settings(default_settings(), target)
    return target
