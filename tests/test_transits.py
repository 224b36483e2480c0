from __future__ import annotations

import pytest

from seerengine.core.bodies import PLANETS
from seerengine.core.time import J2000
from seerengine.ephemeris.positions import BodyPosition, sky_positions
from seerengine.geometry.aspects import NATAL_ORBS, TRANSIT_ORBS, AspectType
from seerengine.transits.engine import natal_aspects, transits
from tests.helpers import LinearEphemeris


def _positions(**entries: tuple[float, float]) -> dict[str, BodyPosition]:
    return {body: BodyPosition(body=body, longitude=lon, speed=speed) for body, (lon, speed) in entries.items()}


def test_transits_sorted_tightest_first() -> None:
    natal = _positions(sun=(10.0, 1.0))
    sky = _positions(sun=(12.0, 1.0), mars=(100.0, 0.5))
    found = transits(natal, sky)
    assert [(a.body_a, a.body_b, a.aspect) for a in found] == [
        ("mars", "sun", AspectType.SQUARE),
        ("sun", "sun", AspectType.CONJUNCTION),
    ]
    assert found[0].orb == pytest.approx(0.0)
    assert found[0].is_exact
    assert found[1].orb == pytest.approx(2.0)
    assert not found[1].is_exact


def test_applying_and_separating() -> None:
    natal = _positions(sun=(10.0, 1.0))
    approaching = transits(natal, _positions(sun=(8.0, 1.0)))[0]
    leaving = transits(natal, _positions(sun=(12.0, 1.0)))[0]
    assert approaching.applying
    assert not leaving.applying


def test_retrograde_body_applies_from_ahead() -> None:
    natal = _positions(venus=(100.0, 1.0))
    found = transits(natal, _positions(mercury=(103.0, -0.7)), bodies=None)
    assert len(found) == 1
    assert found[0].applying


def test_orb_bound_and_one_aspect_per_pair() -> None:
    natal = _positions(sun=(0.0, 1.0), moon=(95.0, 13.0), venus=(200.0, 1.2))
    sky = _positions(sun=(6.0, 1.0), moon=(178.0, 13.0), venus=(61.0, 1.2), mars=(123.0, 0.5))
    found = transits(natal, sky, TRANSIT_ORBS, bodies=None)
    pairs = [(a.body_a, a.body_b) for a in found]
    assert len(pairs) == len(set(pairs))
    for aspect in found:
        assert aspect.orb <= TRANSIT_ORBS.max_orb(aspect.aspect)
        assert aspect.max_orb == TRANSIT_ORBS.max_orb(aspect.aspect)


def test_body_filter_and_reference_bodies() -> None:
    natal = _positions(sun=(0.0, 1.0), moon=(90.0, 13.0))
    sky = _positions(sun=(0.5, 1.0), moon=(90.5, 13.0))
    only_sun = transits(natal, sky, bodies=["Sun"])
    assert {(a.body_a, a.body_b) for a in only_sun} == {("sun", "sun")}

    sun_to_moon = transits(natal, sky, bodies=["sun"], reference_bodies=["moon"])
    assert [(a.body_a, a.body_b, a.aspect) for a in sun_to_moon] == [("sun", "moon", AspectType.SQUARE)]


def test_transits_accept_natal_charts(sample_chart) -> None:
    sky = sky_positions(J2000, PLANETS)
    found = transits(sample_chart, sky)
    assert all(a.body_a in PLANETS and a.body_b in PLANETS for a in found)


def test_no_aspects_returns_empty_list() -> None:
    natal = _positions(sun=(0.0, 1.0))
    assert transits(natal, _positions(sun=(45.0, 1.0))) == []


def test_rejects_unsupported_inputs() -> None:
    with pytest.raises(TypeError):
        transits(42, {})  # type: ignore[arg-type]


def test_aspect_label_and_dict() -> None:
    found = transits(_positions(sun=(10.0, 1.0)), _positions(mars=(100.0, 0.5)))
    aspect = found[0]
    assert aspect.label() == "Mars square Sun"
    assert aspect.angle == 90.0
    assert aspect.as_dict()["aspect"] == "square"
    assert aspect.as_dict()["exact"] is True


def test_natal_aspects_each_pair_once() -> None:
    positions = _positions(sun=(0.0, 1.0), moon=(5.0, 13.0), mars=(120.0, 0.5))
    found = natal_aspects(positions, NATAL_ORBS)
    pairs = {frozenset((a.body_a, a.body_b)) for a in found}
    assert pairs == {frozenset(("sun", "moon")), frozenset(("sun", "mars")), frozenset(("moon", "mars"))}


def test_natal_aspects_use_relative_speed() -> None:
    # The faster second body runs away from the first.
    positions = _positions(sun=(0.0, 1.0), moon=(5.0, 13.0))
    (aspect,) = natal_aspects(positions)
    assert aspect.aspect is AspectType.CONJUNCTION
    assert not aspect.applying


def test_natal_aspects_skip_the_node_axis() -> None:
    positions = _positions(north_node=(10.0, -0.05), south_node=(190.0, -0.05))
    assert natal_aspects(positions) == []


def test_moving_sky_from_provider() -> None:
    provider = LinearEphemeris(base={"sun": 10.0, "mars": 95.0}, rates={"sun": 1.0, "mars": 0.5})
    natal = _positions(sun=(10.0, 1.0))
    sky = sky_positions(J2000 + 10.0, ["sun", "mars"], provider)
    found = transits(natal, sky)
    assert {a.body_a for a in found} == {"mars"}
    assert found[0].aspect is AspectType.SQUARE
    assert found[0].orb == pytest.approx(0.0, abs=1e-9)
