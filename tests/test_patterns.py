from __future__ import annotations

from seerengine.chart.patterns import PatternKind, detect_patterns


def _kinds(patterns) -> list[PatternKind]:
    return [pattern.kind for pattern in patterns]


def test_stellium_needs_three_bodies_in_one_sign() -> None:
    patterns = detect_patterns({"sun": 10.0, "moon": 15.0, "mercury": 20.0, "venus": 200.0})
    assert _kinds(patterns) == [PatternKind.STELLIUM]
    stellium = patterns[0]
    assert stellium.sign == "Aries"
    assert stellium.bodies == ("sun", "moon", "mercury")
    assert stellium.influence == "mixed"

    assert detect_patterns({"sun": 10.0, "moon": 15.0, "venus": 200.0}) == ()


def test_one_stellium_per_sign() -> None:
    patterns = detect_patterns(
        {"sun": 1.0, "moon": 2.0, "mercury": 3.0, "venus": 31.0, "mars": 32.0, "jupiter": 33.0}
    )
    assert [p.sign for p in patterns] == ["Aries", "Taurus"]


def test_grand_trine() -> None:
    patterns = detect_patterns({"sun": 0.0, "mars": 125.0, "jupiter": 238.0})
    assert _kinds(patterns) == [PatternKind.GRAND_TRINE]
    assert patterns[0].influence == "positive"
    assert set(patterns[0].bodies) == {"sun", "mars", "jupiter"}


def test_t_square() -> None:
    patterns = detect_patterns({"sun": 0.0, "moon": 180.0, "mars": 90.0})
    assert _kinds(patterns) == [PatternKind.T_SQUARE]
    assert patterns[0].bodies == ("sun", "moon", "mars")
    assert patterns[0].influence == "challenging"


def test_grand_cross_also_contains_its_t_squares() -> None:
    patterns = detect_patterns({"sun": 0.0, "moon": 90.0, "mars": 180.0, "saturn": 270.0})
    crosses = [p for p in patterns if p.kind is PatternKind.GRAND_CROSS]
    assert len(crosses) == 1
    assert set(crosses[0].bodies) == {"sun", "moon", "mars", "saturn"}
    assert _kinds(patterns).count(PatternKind.T_SQUARE) == 4


def test_grand_cross_found_whatever_the_body_order() -> None:
    patterns = detect_patterns({"sun": 0.0, "mars": 180.0, "moon": 90.0, "saturn": 270.0})
    assert PatternKind.GRAND_CROSS in _kinds(patterns)


def test_derived_points_only_join_stelliums() -> None:
    longitudes = {"sun": 0.0, "mars": 120.0, "north_node": 240.0, "moon": 5.0, "fortune": 10.0}
    patterns = detect_patterns(longitudes, stellium_only={"north_node", "fortune"})
    assert _kinds(patterns) == [PatternKind.STELLIUM]
    assert "fortune" in patterns[0].bodies

    everything = detect_patterns(longitudes)
    assert PatternKind.GRAND_TRINE in _kinds(everything)


def test_out_of_orb_figures_are_ignored() -> None:
    assert detect_patterns({"sun": 0.0, "mars": 130.0, "jupiter": 240.0}) == ()
