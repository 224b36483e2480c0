from __future__ import annotations

import pytest

from seerengine.core.angles import angular_distance, delta_angle, normalize_degrees
from seerengine.core.numeric import round_half_up
from seerengine.core.zodiac import sign_index
from seerengine.geometry.houses import house

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies
settings = hypothesis.settings

FLOATS = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
LONGITUDES = st.floats(min_value=0.0, max_value=359.999, allow_nan=False, allow_infinity=False)


@settings(deadline=None)
@given(angle=FLOATS)
def test_normalize_range(angle: float) -> None:
    value = normalize_degrees(angle)
    assert 0.0 <= value < 360.0


@settings(deadline=None)
@given(a=FLOATS, b=FLOATS)
def test_distance_symmetric_and_bounded(a: float, b: float) -> None:
    forward = angular_distance(a, b)
    assert 0.0 <= forward <= 180.0
    assert forward == pytest.approx(angular_distance(b, a), abs=1e-9)


@settings(deadline=None)
@given(a=FLOATS, b=FLOATS)
def test_delta_matches_distance(a: float, b: float) -> None:
    assert abs(delta_angle(a, b)) == pytest.approx(angular_distance(a, b), abs=1e-6)


@settings(deadline=None)
@given(lon=LONGITUDES, asc=LONGITUDES)
def test_house_and_sign_ranges(lon: float, asc: float) -> None:
    assert 1 <= house(lon, asc) <= 12
    assert 0 <= sign_index(lon) <= 11


@settings(deadline=None)
@given(value=st.floats(min_value=-1e4, max_value=1e4, allow_nan=False))
def test_round_half_up_within_half(value: float) -> None:
    rounded = round_half_up(value)
    assert rounded == int(rounded)
    assert -0.5 - 1e-9 <= rounded - value <= 0.5 + 1e-9
