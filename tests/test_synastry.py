from __future__ import annotations

import json

import pytest
from prometheus_client import CollectorRegistry

from seerengine.chart.natal import build_chart
from seerengine.observability.metrics import ensure_metrics_registered
from seerengine.synastry.engine import (
    EMPTY_SCORE,
    Nature,
    Tier,
    element_harmony,
    selection_seed,
    synastry,
    tier_for_score,
    tier_rank,
)
from seerengine.synastry.tables import (
    FALLBACK_CHALLENGE,
    FALLBACK_ELEMENT_DESCRIPTION,
    FALLBACK_STRENGTH,
    Theme,
    element_compatibility,
    element_description,
    pair_theme,
    pair_weight,
)
from tests.helpers import StubChart


def _theme(report, theme: Theme):
    return next(t for t in report.themes if t.theme is theme)


def test_exact_venus_mars_conjunction() -> None:
    report = synastry(StubChart("A", {"venus": 0.0}), StubChart("B", {"mars": 0.0}))

    assert len(report.aspects) == 1
    aspect = report.aspects[0]
    assert (aspect.body_a, aspect.body_b) == ("venus", "mars")
    assert aspect.weight == pytest.approx(15.0)
    assert aspect.nature is Nature.INTENSE
    assert aspect.theme is Theme.ATTRACTION

    assert _theme(report, Theme.ATTRACTION).score == pytest.approx(9.0)
    assert report.themes[0].theme is Theme.ATTRACTION
    assert report.element_harmony.score == 8
    assert report.score == 63
    assert report.tier is Tier.KINDRED
    assert report.strengths == ("Physical chemistry is strong. The body knows.",)
    assert report.challenges == (FALLBACK_CHALLENGE,)


def test_no_contacts_scores_fixed_baseline() -> None:
    report = synastry(StubChart("A", {"venus": 0.0}), StubChart("B", {"mars": 45.0}))
    assert report.aspects == ()
    assert report.score == EMPTY_SCORE
    assert report.tier is Tier.FRICTION
    assert report.strengths == (FALLBACK_STRENGTH,)
    assert report.challenges == (FALLBACK_CHALLENGE,)
    assert all(t.score == 0.0 and t.count == 0 for t in report.themes)


def test_hard_aspect_adds_theme_challenge() -> None:
    report = synastry(StubChart("A", {"venus": 0.0}), StubChart("B", {"saturn": 90.0}))
    aspect = report.aspects[0]
    assert aspect.weight == pytest.approx(10.5)
    assert aspect.nature is Nature.CHALLENGING
    assert _theme(report, Theme.COMMITMENT).score == pytest.approx(4.2)
    assert report.challenges == ("Freedom and structure compete. Finding the balance is the work.",)
    assert report.score == 31


def test_wide_aspect_gives_weak_theme() -> None:
    report = synastry(StubChart("A", {"mercury": 0.0}), StubChart("B", {"mercury": 95.9}))
    aspect = report.aspects[0]
    assert aspect.orb == pytest.approx(5.9)
    assert aspect.weight == pytest.approx(5.0)
    assert _theme(report, Theme.COMMUNICATION).score == pytest.approx(2.0)
    # weight 5.0 is not heavy enough for a hard-aspect challenge
    assert report.challenges == (
        "Words may fail where feeling should carry. Learn each other's language.",
    )


def test_aspects_sorted_heaviest_first(sample_birth, partner_birth) -> None:
    report = synastry(build_chart(sample_birth), build_chart(partner_birth))
    weights = [a.weight for a in report.aspects]
    assert weights == sorted(weights, reverse=True)
    assert report.key_aspects == report.aspects[:5]
    assert 0 <= report.score <= 100
    assert report.tier is tier_for_score(report.score)
    assert report.person_a["name"] == "Ada"
    assert report.person_b["sun_sign"] == build_chart(partner_birth).sign_of("sun")


def test_score_ignores_comparison_order(sample_birth, partner_birth) -> None:
    first, second = build_chart(sample_birth), build_chart(partner_birth)
    forward = synastry(first, second)
    backward = synastry(second, first)
    assert forward.score == backward.score
    assert forward.tier is backward.tier
    assert sorted(a.weight for a in forward.aspects) == sorted(a.weight for a in backward.aspects)
    assert forward.element_harmony.score == backward.element_harmony.score


def test_report_is_json_friendly(sample_birth, partner_birth) -> None:
    report = synastry(build_chart(sample_birth), build_chart(partner_birth))
    payload = json.loads(json.dumps(report.as_dict()))
    assert payload["tier"] == report.tier.value
    assert len(payload["themes"]) == len(Theme)
    assert payload["seed"] == selection_seed("Ada", "Grace")


def test_synastry_reports_counted() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    before = registry.get_sample_value("seerengine_synastry_reports_total", {"tier": "kindred"}) or 0.0
    synastry(StubChart("A", {"venus": 0.0}), StubChart("B", {"mars": 0.0}))
    after = registry.get_sample_value("seerengine_synastry_reports_total", {"tier": "kindred"})
    assert after == before + 1.0


@pytest.mark.parametrize(
    "score, tier",
    [
        (100, Tier.FATED),
        (85, Tier.FATED),
        (84.9, Tier.MAGNETIC),
        (70, Tier.MAGNETIC),
        (55, Tier.KINDRED),
        (40, Tier.COMPLEX),
        (25, Tier.FRICTION),
        (24, Tier.DISTANT),
        (0, Tier.DISTANT),
    ],
)
def test_tier_for_score(score: float, tier: Tier) -> None:
    assert tier_for_score(score) is tier


def test_tier_rank_orders_tiers() -> None:
    assert tier_rank(Tier.DISTANT) == 0
    assert tier_rank("kindred") == 3
    assert tier_rank(Tier.FATED) == 5
    assert Tier.MAGNETIC.label == "Magnetic"


def test_selection_seed_is_stable() -> None:
    seed = selection_seed("Ada", "Grace")
    assert seed == selection_seed("Ada", "Grace")
    assert seed != selection_seed("Grace", "Ada")
    assert 0 <= seed < 2**64


def test_pair_tables_ignore_order() -> None:
    assert pair_weight("venus", "mars") == pair_weight("mars", "venus") == 10
    assert pair_weight("Mars", "mars") == 7
    assert pair_theme("saturn", "venus") is pair_theme("venus", "saturn") is Theme.COMMITMENT
    assert pair_weight("saturn", "pluto") == 3
    assert pair_theme("saturn", "pluto") is Theme.IDENTITY


def test_element_tables() -> None:
    assert element_compatibility("water", "earth") == 9
    assert element_compatibility("earth", "water") == 9
    assert element_compatibility("fire", "ether") == 5
    assert element_description("fire", "ether") == FALLBACK_ELEMENT_DESCRIPTION


def test_element_harmony_weights_personal_planets() -> None:
    # Sun and Moon in water outweigh three outer planets in fire.
    first = StubChart(
        "A", {"sun": 100.0, "moon": 220.0, "jupiter": 5.0, "saturn": 125.0, "uranus": 245.0}
    )
    second = StubChart("B", {"sun": 40.0, "venus": 160.0})
    harmony = element_harmony(first, second)
    assert harmony.dominant_a == "water"
    assert harmony.dominant_b == "earth"
    assert harmony.score == 9
