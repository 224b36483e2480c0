"""Configuration helpers exposed at :mod:`seerengine.config`."""

from __future__ import annotations

from .settings import (
    CacheCfg,
    DecisionCfg,
    EphemerisCfg,
    LoggingCfg,
    OrbsCfg,
    Settings,
    config_path,
    default_settings,
    ensure_default_config,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
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
