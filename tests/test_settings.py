from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from seerengine.config import (
    DecisionCfg,
    OrbsCfg,
    Settings,
    config_path,
    ensure_default_config,
    load_settings,
    save_settings,
)
from seerengine.exceptions import ConfigError, SeerEngineError
from seerengine.geometry.aspects import NATAL_ORBS, TRANSIT_ORBS


def test_first_load_writes_defaults(seerengine_home: Path) -> None:
    settings = load_settings()
    target = seerengine_home / "config.yaml"
    assert target.exists()
    assert settings == Settings()
    on_disk = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert on_disk["schema_version"] == 2
    assert on_disk["ephemeris"]["provider"] == "closed_form"


def test_config_path_follows_environment(seerengine_home: Path) -> None:
    assert config_path() == seerengine_home / "config.yaml"
    assert seerengine_home.is_dir()


def test_save_and_reload(tmp_path: Path) -> None:
    settings = Settings(decision=DecisionCfg(confidence_floor=0.5, default_mode="guidance"))
    path = save_settings(settings, tmp_path / "nested" / "settings.yaml")
    assert path.exists()
    assert load_settings(path) == settings


def test_orb_tables_convert_to_engine_tables() -> None:
    orbs = Settings().orbs
    assert orbs.table("transit") == TRANSIT_ORBS
    assert orbs.table("natal").as_dict() == NATAL_ORBS.as_dict()
    assert orbs.table("synastry").name == "synastry"


def test_orbs_are_capped() -> None:
    cfg = OrbsCfg(natal={"conjunction": 20, "trine": -1, "square": 5})
    assert cfg.natal == {"conjunction": 15.0, "trine": 0.0, "square": 5.0}
    assert cfg.transit == TRANSIT_ORBS.as_dict()


def test_unknown_aspect_rejected() -> None:
    with pytest.raises(ValidationError):
        OrbsCfg(natal={"semi_square": 2})


@pytest.mark.parametrize("raw, expected", [(2, 1.0), (-0.5, 0.0), ("0.4", 0.4)])
def test_confidence_floor_capped(raw, expected: float) -> None:
    assert DecisionCfg(confidence_floor=raw).confidence_floor == pytest.approx(expected)


def test_cache_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(cache={"max_entries": 0})


def test_v1_flat_orbs_upgraded(tmp_path: Path) -> None:
    path = tmp_path / "old.yaml"
    path.write_text("orbs:\n  conjunction: 6\n  opposition: 6\n", encoding="utf-8")

    settings = load_settings(path)

    assert settings.schema_version == 2
    assert settings.orbs.natal == {"conjunction": 6.0, "opposition": 6.0}
    assert settings.orbs.transit == TRANSIT_ORBS.as_dict()
    rewritten = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert rewritten["schema_version"] == 2
    assert rewritten["orbs"]["natal"]["conjunction"] == 6.0


@pytest.mark.parametrize(
    "content",
    [
        "orbs: [unclosed\n",
        "- just\n- a list\n",
        "ephemeris:\n  provider: nasa\n",
    ],
)
def test_broken_files_raise_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_settings(path)
    assert isinstance(excinfo.value, SeerEngineError)
    assert str(path) in str(excinfo.value)


def test_empty_file_loads_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path).orbs == OrbsCfg()


def test_ensure_default_config_keeps_existing(seerengine_home: Path) -> None:
    target = ensure_default_config()
    target.write_text("logging:\n  level: DEBUG\nschema_version: 2\n", encoding="utf-8")
    assert ensure_default_config() == target
    assert load_settings().logging.level == "DEBUG"
