from __future__ import annotations

import pytest

from seerengine.synastry.engine import synastry, tier_for_score
from tests.helpers import StubChart

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies
settings = hypothesis.settings

BODIES = ("sun", "moon", "mercury", "venus", "mars", "jupiter", "saturn", "north_node")
CHARTS = st.dictionaries(
    st.sampled_from(BODIES),
    st.floats(min_value=0.0, max_value=359.99, allow_nan=False),
    min_size=1,
)


@settings(deadline=None)
@given(first=CHARTS, second=CHARTS)
def test_score_and_tier_consistent(first, second) -> None:
    report = synastry(StubChart("A", first), StubChart("B", second))
    assert 0 <= report.score <= 100
    assert report.tier is tier_for_score(report.score)
    assert report.strengths and report.challenges
    assert all(0.0 <= theme.score <= 10.0 for theme in report.themes)
    weights = [a.weight for a in report.aspects]
    assert weights == sorted(weights, reverse=True)


@settings(deadline=None)
@given(first=CHARTS, second=CHARTS)
def test_score_symmetric(first, second) -> None:
    forward = synastry(StubChart("A", first), StubChart("B", second))
    backward = synastry(StubChart("B", second), StubChart("A", first))
    assert forward.score == backward.score
