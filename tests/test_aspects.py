from __future__ import annotations

import pytest

from seerengine.geometry.aspects import (
    NATAL_ORBS,
    SYNASTRY_ORBS,
    TRANSIT_ORBS,
    AspectType,
    OrbTable,
    match_aspect,
    match_longitudes,
)


@pytest.mark.parametrize(
    "distance, aspect, orb",
    [
        (0.0, AspectType.CONJUNCTION, 0.0),
        (8.0, AspectType.CONJUNCTION, 8.0),
        (29.0, AspectType.SEMI_SEXTILE, 1.0),
        (62.5, AspectType.SEXTILE, 2.5),
        (95.0, AspectType.SQUARE, 5.0),
        (114.0, AspectType.TRINE, 6.0),
        (152.0, AspectType.QUINCUNX, 2.0),
        (175.0, AspectType.OPPOSITION, 5.0),
    ],
)
def test_match_aspect_natal(distance: float, aspect: AspectType, orb: float) -> None:
    match = match_aspect(distance, NATAL_ORBS)
    assert match is not None
    assert match.aspect is aspect
    assert match.orb == pytest.approx(orb)


@pytest.mark.parametrize("distance", [8.01, 20.0, 45.0, 75.0, 105.0, 140.0, 165.0])
def test_unaspected_distances(distance: float) -> None:
    assert match_aspect(distance, NATAL_ORBS) is None


def test_transit_table_has_no_semi_sextile() -> None:
    assert match_aspect(30.0, TRANSIT_ORBS) is None
    assert TRANSIT_ORBS.max_orb("semi-sextile") == 0.0
    assert AspectType.SEMI_SEXTILE not in TRANSIT_ORBS


def test_orb_tables() -> None:
    assert NATAL_ORBS.max_orb(AspectType.TRINE) == 7.0
    assert TRANSIT_ORBS.max_orb("trine") == 6.0
    assert SYNASTRY_ORBS.max_orb("opposition") == 7.0
    assert SYNASTRY_ORBS.as_dict()["conjunction"] == 8.0


def test_closest_target_wins_when_orbs_overlap() -> None:
    wide = OrbTable("wide", {"conjunction": 20.0, "semi-sextile": 15.0})
    match = match_aspect(18.0, wide)
    assert match is not None
    assert match.aspect is AspectType.SEMI_SEXTILE
    assert match.orb == pytest.approx(12.0)


def test_exact_flag() -> None:
    assert match_aspect(120.9, NATAL_ORBS).is_exact  # type: ignore[union-attr]
    assert not match_aspect(121.0, NATAL_ORBS).is_exact  # type: ignore[union-attr]


def test_match_longitudes_wraps_zero() -> None:
    match = match_longitudes(355.0, 3.0)
    assert match is not None
    assert match.aspect is AspectType.CONJUNCTION
    assert match.orb == pytest.approx(8.0)


def test_orb_table_from_mapping() -> None:
    table = OrbTable.from_mapping("custom", {"trine": 5, "square": 4.5})
    assert table.max_orb("trine") == 5.0
    assert table.as_dict() == {"trine": 5.0, "square": 4.5}


def test_negative_orbs_are_rejected() -> None:
    with pytest.raises(ValueError):
        OrbTable("broken", {"trine": -1.0})


def test_unknown_aspect_names_are_rejected() -> None:
    with pytest.raises(ValueError):
        OrbTable.from_mapping("broken", {"biquintile": 2.0})


def test_aspect_angles() -> None:
    assert AspectType("trine").angle == 120.0
    assert AspectType.QUINCUNX.angle == 150.0
