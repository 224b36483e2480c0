from __future__ import annotations

import pytest

from seerengine.ephemeris.lunar import moon_phase
from seerengine.scoring.category import category_score, interpret_transit, orb_multiplier, score_band
from seerengine.scoring.tables import (
    Domain,
    NatalModifier,
    aspect_impact,
    conjunction_impact,
    domains_for,
    natal_modifiers,
)
from seerengine.core.time import J2000
from seerengine.ephemeris.kernel import is_retrograde
from seerengine.ephemeris.positions import sky_positions
from seerengine.transits.engine import transits
from tests.helpers import LinearEphemeris, StubChart, make_aspect

NEW_MOON = moon_phase(0.0, 0.0)
FULL_MOON = moon_phase(0.0, 180.0)
WANING = moon_phase(0.0, 240.0)
WAXING = moon_phase(0.0, 60.0)
QUARTER = moon_phase(0.0, 90.0)


def test_neutral_day_scores_five() -> None:
    result = category_score(Domain.LOVE, [], None)
    assert result.score == 5
    assert result.advice == "Mixed energy. Be cautious."
    assert result.good_for == ()
    assert result.bad_for == ("major decisions", "rushing")
    assert result.reasoning == ()


def test_exact_sun_conjunction_lifts_career_only() -> None:
    transit = make_aspect("sun", "sun", "conjunction", 0.2)
    career = category_score("career", [transit], QUARTER)
    love = category_score("love", [transit], QUARTER)

    # both benefic (+2) x exact (1.5) = +3
    assert career.score == 8
    assert career.advice == "Excellent energy! Go for it."
    assert career.reasoning == ("Transit Sun merges with your natal Sun (orb: 0.2°)",)
    assert career.good_for == ("taking action", "making moves")
    assert love.score == 5


def test_orb_multiplier() -> None:
    assert orb_multiplier(make_aspect("sun", "moon", "trine", 0.5)) == 1.5
    assert orb_multiplier(make_aspect("sun", "moon", "trine", 3.0, max_orb=6.0)) == pytest.approx(0.5)
    assert orb_multiplier(make_aspect("sun", "moon", "trine", 6.0, max_orb=6.0)) == 0.0
    assert orb_multiplier(make_aspect("sun", "moon", "trine", 3.0, max_orb=0.0)) == 0.0


def test_partial_orb_scales_impact() -> None:
    # trine +2 x (1 - 3/6) = +1 -> 6
    transit = make_aspect("jupiter", "venus", "trine", 3.0)
    assert category_score("money", [transit], None).score == 6


@pytest.mark.parametrize(
    "aspect, bodies, domain, expected",
    [
        ("square", ("mars", "saturn"), "career", 1),
        ("trine", ("jupiter", "venus"), "money", 10),
    ],
)
def test_score_is_clamped(aspect: str, bodies: tuple[str, str], domain: str, expected: int) -> None:
    transits = [make_aspect(*bodies, aspect, 0.1) for _ in range(5)]
    assert category_score(domain, transits, None).score == expected


def test_negative_natal_modifier_adds_warning_and_risk_tags() -> None:
    modifiers = natal_modifiers({"venus": "Pisces"})
    result = category_score("money", [], None, modifiers)
    assert result.score == 3
    assert result.reasoning[0].startswith("Your Venus in Pisces makes you idealistic about money")
    assert result.bad_for == ("risky moves", "impulsive decisions", "big moves", "confrontation")
    assert result.good_for == ("reflection", "planning")
    assert result.advice == "Challenging energy. Wait if possible."


def test_evidence_is_deduplicated() -> None:
    modifiers = natal_modifiers({"moon": "Capricorn", "venus": "Aries"})
    result = category_score("love", [], None, modifiers)
    assert result.score == 3
    assert result.bad_for.count("risky moves") == 1
    assert len(result.reasoning) == 2


@pytest.mark.parametrize(
    "phase, domain, expected, tag",
    [
        (NEW_MOON, "decisions", 6, "starting projects"),
        (NEW_MOON, "creativity", 6, "starting projects"),
        (FULL_MOON, "love", 6, None),
        (WAXING, "career", 6, "pushing forward"),
    ],
)
def test_moon_phase_adjustments(phase, domain: str, expected: int, tag: str | None) -> None:
    result = category_score(domain, [], phase)
    assert result.score == expected
    if tag is not None:
        assert tag in result.good_for


def test_half_points_round_up() -> None:
    # 5 - 0.5 = 4.5 rounds to 5, not to the even 4
    health = category_score("health", [], FULL_MOON)
    assert health.score == 5
    assert "rest" in health.bad_for
    # 5 + 0.5 = 5.5 rounds to 6
    assert category_score("spiritual", [], NEW_MOON).score == 6


def test_waning_moon_discourages_new_decisions() -> None:
    result = category_score("decisions", [], WANING)
    assert result.score == 5
    assert "starting new ventures" in result.bad_for
    assert result.reasoning == ("Waning moon is not the time to initiate",)


def test_unknown_bodies_contribute_nothing() -> None:
    transit = make_aspect("vesta", "juno", "square", 0.0)
    assert category_score("career", [transit], None).score == 5
    assert domains_for("vesta") == ()


def test_unknown_domain_is_rejected() -> None:
    with pytest.raises(ValueError):
        category_score("romance", [], None)


@pytest.mark.parametrize(
    "first, second, expected",
    [
        ("venus", "jupiter", 2.0),
        ("mars", "saturn", -2.0),
        ("sun", "pluto", -1.0),
        ("moon", "mercury", 0.0),
        ("venus", "moon", 0.0),
    ],
)
def test_conjunction_impact(first: str, second: str, expected: float) -> None:
    assert conjunction_impact(first, second) == expected
    assert conjunction_impact(second, first) == expected


def test_aspect_impact_table() -> None:
    assert aspect_impact("trine", "moon", "mercury") == 2.0  # type: ignore[arg-type]
    assert aspect_impact("opposition", "moon", "mercury") == -1.5  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "score, advice",
    [
        (10, "Excellent energy! Go for it."),
        (6, "Good energy. Proceed with awareness."),
        (4, "Mixed energy. Be cautious."),
        (1, "Challenging energy. Wait if possible."),
    ],
)
def test_score_bands(score: int, advice: str) -> None:
    assert score_band(score)[0] == advice


def test_interpretation_text() -> None:
    assert (
        interpret_transit(make_aspect("north_node", "venus", "quincunx", 1.0))
        == "Transit North Node creates tension with your natal Venus"
    )


def test_natal_modifiers_accept_charts(sample_chart) -> None:
    modifiers = natal_modifiers(sample_chart)
    placements = sample_chart.placements()
    for modifier in modifiers:
        assert isinstance(modifier, NatalModifier)
        assert placements[modifier.body] == modifier.sign


def test_saturn_always_modifies_something() -> None:
    assert natal_modifiers({"saturn": "Taurus"})[0].deltas == {Domain.CAREER: -1}
    assert natal_modifiers({"saturn": "Leo"})[0].deltas == {Domain.DECISIONS: -1}


def test_transiting_sun_over_natal_sun_in_leo() -> None:
    natal = StubChart("Leo", {"sun": 130.0, "moon": 95.0})
    sky_provider = LinearEphemeris({"sun": 132.0, "moon": 200.0}, {"sun": 1.0, "moon": 13.0})
    sky = sky_positions(J2000, ("sun", "moon"), sky_provider)

    found = transits(natal, sky, bodies=("sun", "moon"))
    assert [(a.body_a, a.body_b, a.aspect.value) for a in found] == [("sun", "sun", "conjunction")]
    assert found[0].orb == pytest.approx(2.0)

    # benefic pair (+2) x (1 - 2/8) = +1.5 on every Sun-ruled domain
    assert domains_for("sun") == (Domain.CAREER, Domain.DECISIONS, Domain.HEALTH)
    for domain in domains_for("sun"):
        scored = category_score(domain, found, None)
        assert scored.score == 7
        assert scored.reasoning == ("Transit Sun merges with your natal Sun (orb: 2.0°)",)
    # love follows the Moon, Venus and Neptune; the natal Moon is 37° away
    assert category_score(Domain.LOVE, found, None).score == 5

    assert not is_retrograde("sun", J2000, sky_provider)
    assert not sky["sun"].retrograde
