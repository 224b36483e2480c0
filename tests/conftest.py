from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path

import pytest

from seerengine.chart.natal import BirthRecord, NatalChart, build_chart
from tests.helpers import SAMPLE_LONGITUDES, SAMPLE_SPEEDS, LinearEphemeris


@pytest.fixture(autouse=True)
def seerengine_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings home at a per-test directory."""

    home = tmp_path / "seerengine-home"
    monkeypatch.setenv("SEERENGINE_HOME", str(home))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return home


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sample_birth() -> BirthRecord:
    return BirthRecord(
        name="Ada",
        date=_dt.date(1990, 6, 15),
        time=_dt.time(14, 30),
        latitude=51.5,
        longitude=-0.13,
        utc_offset_hours=1.0,
    )


@pytest.fixture
def partner_birth() -> BirthRecord:
    return BirthRecord(
        name="Grace",
        date=_dt.date(1988, 11, 2),
        time=_dt.time(7, 45),
        latitude=40.71,
        longitude=-74.0,
        utc_offset_hours=-5.0,
    )


@pytest.fixture
def sample_chart(sample_birth: BirthRecord) -> NatalChart:
    return build_chart(sample_birth)


@pytest.fixture
def linear_provider() -> LinearEphemeris:
    return LinearEphemeris(base=SAMPLE_LONGITUDES, rates=SAMPLE_SPEEDS)
