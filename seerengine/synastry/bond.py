"""Today's Bond: the day's weather between two charts.

The current sky is transited against both natal charts.  The resulting
contacts are tallied into a :class:`TransitProfile`, which picks one of
ten moods from an ordered rule list and a 5-99 pulse anchored on the
static synastry score.  When the sky cannot be computed the mood and
pulse are derived from the synastry report alone.

Text choices (rituals, transit lines) are keyed on the UTC calendar date
of the reading, so a pair sees the same wording all day.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final

from ..core.bodies import PLANETS, canonical_name, display_name
from ..core.numeric import clamp, round_half_up
from ..core.time import Instant
from ..ephemeris.lunar import MoonPhase, moon_phase
from ..ephemeris.positions import BodyPosition, sky_positions
from ..ephemeris.provider import LongitudeProvider, default_provider
from ..ephemeris.rulers import day_ruler
from ..exceptions import ProviderError
from ..geometry.aspects import TRANSIT_ORBS, AspectType, OrbTable
from ..geometry.houses import house
from ..observability.metrics import BOND_READINGS
from ..transits.engine import Aspect, transits
from .engine import SynastryReport
from .tables import Theme

LOG = logging.getLogger(__name__)

__all__ = [
    "BondMood",
    "LOVE_BODIES",
    "INTENSITY_BODIES",
    "ScoredTransit",
    "TodaysBond",
    "TransitProfile",
    "calculate_pulse",
    "day_seed",
    "determine_mood",
    "fallback_pulse",
    "mood_from_synastry",
    "profile_transits",
    "todays_bond",
    "transit_relevance",
]


class BondMood(StrEnum):
    ELECTRIC = "electric"
    TENDER = "tender"
    VOLATILE = "volatile"
    STILL = "still"
    MAGNETIC = "magnetic"
    FATED = "fated"
    RESTLESS = "restless"
    RAW = "raw"
    EXPANDING = "expanding"
    DISSOLVING = "dissolving"


LOVE_BODIES: frozenset[str] = frozenset({"venus", "mars", "moon", "sun"})
INTENSITY_BODIES: frozenset[str] = frozenset({"pluto", "uranus", "neptune"})
HARMONIOUS: frozenset[AspectType] = frozenset(
    {AspectType.TRINE, AspectType.SEXTILE, AspectType.CONJUNCTION}
)
CHALLENGING: frozenset[AspectType] = frozenset({AspectType.SQUARE, AspectType.OPPOSITION})

# A transiting body colours the day only inside this orb.
PRESENCE_ORBS: Mapping[str, float] = MappingProxyType(
    {
        "venus": 3.0,
        "mars": 3.0,
        "moon": 3.0,
        "pluto": 2.0,
        "uranus": 2.0,
        "neptune": 2.0,
        "saturn": 2.0,
    }
)

TOP_TRANSIT_LIMIT: Final[int] = 6
LINE_CANDIDATES: Final[int] = 4
LINE_LIMIT: Final[int] = 2
PULSE_RANGE: Final[tuple[int, int]] = (5, 99)
FALLBACK_PULSE_RANGE: Final[tuple[int, int]] = (10, 90)
UNKNOWN_CYCLE_FRACTION: Final[float] = 0.25
KEY_HOUSES: frozenset[int] = frozenset({1, 4, 5, 7, 8, 12})

_M = BondMood

RITUALS: Mapping[BondMood, tuple[str, ...]] = MappingProxyType(
    {
        _M.ELECTRIC: (
            "Say the thing you've been holding back.",
            "Act on impulse today. Think about it tomorrow.",
            "The charge between you is real. Don't ground it out; let it arc.",
        ),
        _M.TENDER: (
            "Be gentle. The opening is real.",
            "Say less. Be near.",
            "Today favors softness over strategy.",
        ),
        _M.VOLATILE: (
            "Name the tension before it names you.",
            "Don't reach for control. Sit with the discomfort.",
            "Conflict today is information, not a verdict.",
        ),
        _M.STILL: (
            "Wait. The stillness is not emptiness.",
            "Nothing needs to happen today. Let the space breathe.",
            "Patience is not passive. It is precision.",
        ),
        _M.MAGNETIC: (
            "You don't need to understand the pull. Just notice it.",
            "Proximity matters today. Close the distance.",
            "What draws you together today is old and certain.",
        ),
        _M.FATED: (
            "This was always going to happen. Be present for it.",
            "The thread between you tightens. Follow it.",
            "Pay attention to the echoes. They carry meaning.",
        ),
        _M.RESTLESS: (
            "Move your body. The restlessness is signal, not noise.",
            "Don't mistake agitation for incompatibility.",
            "Channel the friction outward. Build something. Move.",
        ),
        _M.RAW: (
            "Today strips the surface. Let it.",
            "Vulnerability is not weakness. It is the fastest path in.",
            "Honesty costs something today. Pay it.",
        ),
        _M.EXPANDING: (
            "Dream bigger together today. The sky permits it.",
            "Share what excites you. Enthusiasm is contagious under this sky.",
            "Growth is happening. You might not see it yet, but you'll feel it.",
        ),
        _M.DISSOLVING: (
            "Boundaries soften. Notice what flows in.",
            "Don't cling to the shape of things. Let the edges blur.",
            "Something unseen passes between you today. Trust it.",
        ),
    }
)

# Used when no transit made it into the reading.
RULER_LINES: Mapping[BondMood, str] = MappingProxyType(
    {
        _M.ELECTRIC: "{ruler} rules the day. The current runs faster than usual.",
        _M.TENDER: "{ruler} rules the day. Softness finds an opening.",
        _M.VOLATILE: "{ruler} rules the day. The ground is less steady than it seems.",
        _M.STILL: "{ruler} rules the day. Silence speaks between you.",
        _M.MAGNETIC: "{ruler} rules the day. The pull is quiet but certain.",
        _M.FATED: "{ruler} rules the day. Something old remembers itself.",
        _M.RESTLESS: "{ruler} rules the day. Energy moves without direction.",
        _M.RAW: "{ruler} rules the day. The surface is thinner than usual.",
        _M.EXPANDING: "{ruler} rules the day. The space between you grows outward.",
        _M.DISSOLVING: "{ruler} rules the day. Edges blur where you meet.",
    }
)

# Keyed on (exact, harmonious).
_TRANSIT_TEMPLATES: Mapping[tuple[bool, bool], tuple[str, ...]] = MappingProxyType(
    {
        (True, True): (
            "{body} meets {person}'s {natal} exactly. The timing is precise.",
            "{body} touches {natal} in {person}'s chart. Something aligns.",
            "{body} and {natal} converge for {person}. Pay attention.",
        ),
        (True, False): (
            "{body} presses against {person}'s {natal}. Friction has a purpose.",
            "{body} confronts {natal} in {person}'s chart. Tension is a teacher.",
            "{body} squares off with {person}'s {natal}. Handle with awareness.",
        ),
        (False, True): (
            "{body} drifts toward {person}'s {natal}. A soft pull.",
            "{body} warms {person}'s {natal}. The current is gentle.",
        ),
        (False, False): (
            "{body} unsettles {person}'s {natal}. Something stirs beneath.",
            "{body} tests {person}'s {natal}. Growth rarely feels comfortable.",
        ),
    }
)

VENUS_RETROGRADE_LINE: Final[str] = "Venus is retrograde. Desire reroutes. Old patterns resurface."
VENUS_RETROGRADE_RELEVANCE: Final[float] = 5.0

_ARTICLED = frozenset({"sun", "moon", "north_node", "south_node", "ascendant", "midheaven"})


@dataclass(frozen=True)
class ScoredTransit:
    transit: Aspect
    person: int
    relevance: float


@dataclass(frozen=True)
class TransitProfile:
    """Tally of today's transits to both charts.

    ``present`` holds the transiting bodies that sit inside their
    :data:`PRESENCE_ORBS` entry against either chart.
    """

    harmonious: int = 0
    challenging: int = 0
    exact: int = 0
    present: frozenset[str] = frozenset()
    venus_retrograde: bool = False
    top_transits: tuple[ScoredTransit, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "present", frozenset(canonical_name(b) for b in self.present))
        object.__setattr__(self, "top_transits", tuple(self.top_transits))

    def has(self, body: str) -> bool:
        return canonical_name(body) in self.present


@dataclass(frozen=True)
class TodaysBond:
    person_a: str
    person_b: str
    mood: BondMood
    pulse: int
    transit_lines: tuple[str, ...]
    ritual: str
    moon_phase: str
    moon_illumination: int
    day_ruler: str
    from_sky: bool = True

    def as_dict(self) -> dict[str, Any]:
        return {
            "person_a": self.person_a,
            "person_b": self.person_b,
            "mood": self.mood.value,
            "pulse": self.pulse,
            "transit_lines": list(self.transit_lines),
            "ritual": self.ritual,
            "moon_phase": self.moon_phase,
            "moon_illumination": self.moon_illumination,
            "day_ruler": self.day_ruler,
            "from_sky": self.from_sky,
        }


def day_seed(instant: Instant) -> int:
    """``YYYYMMDD`` of the UTC date, used to pick stable daily wording."""

    utc = instant.to_utc_datetime()
    return utc.year * 10000 + utc.month * 100 + utc.day


def _pick(options: Sequence[str], seed: int) -> str:
    return options[seed % len(options)]


def _oracle_name(body: str) -> str:
    key = canonical_name(body)
    name = display_name(key)
    return f"the {name}" if key in _ARTICLED else name


def _sentence(text: str) -> str:
    return text[:1].upper() + text[1:]


def transit_relevance(aspect: Aspect) -> float:
    """How much one transit matters to the pair's day; higher is stronger."""

    relevance = 0.0
    if aspect.body_b in LOVE_BODIES:
        relevance += 3
    if aspect.body_a in LOVE_BODIES:
        relevance += 2
    if aspect.body_a in INTENSITY_BODIES:
        relevance += 2
    if aspect.is_exact:
        relevance += 4
    return relevance + max(0.0, 3.0 - aspect.orb)


def profile_transits(
    chart_a: Any,
    chart_b: Any,
    sky: Mapping[str, BodyPosition],
    *,
    orbs: OrbTable = TRANSIT_ORBS,
) -> TransitProfile:
    """Transit ``sky`` against both charts and tally what the pair feels.

    Harmonious and challenging counts only include contacts with a love
    body on either side; the exact count covers every contact.
    """

    found: list[Aspect] = []
    scored: list[ScoredTransit] = []
    for person, chart in enumerate((chart_a, chart_b), start=1):
        hits = transits(chart, sky, orbs, PLANETS)
        found.extend(hits)
        scored.extend(ScoredTransit(hit, person, transit_relevance(hit)) for hit in hits)
    scored.sort(key=lambda item: item.relevance, reverse=True)

    love = [a for a in found if a.body_a in LOVE_BODIES or a.body_b in LOVE_BODIES]
    present = frozenset(
        a.body_a for a in found if a.body_a in PRESENCE_ORBS and a.orb < PRESENCE_ORBS[a.body_a]
    )
    venus = sky.get("venus")
    return TransitProfile(
        harmonious=sum(1 for a in love if a.aspect in HARMONIOUS),
        challenging=sum(1 for a in love if a.aspect in CHALLENGING),
        exact=sum(1 for a in found if a.is_exact),
        present=present,
        venus_retrograde=bool(venus is not None and venus.retrograde),
        top_transits=tuple(scored[:TOP_TRANSIT_LIMIT]),
    )


def determine_mood(profile: TransitProfile, synastry_score: int, cycle_fraction: float) -> BondMood:
    """First matching rule wins; outer planets outrank everything else.

    ``cycle_fraction`` is the lunar cycle position in ``[0, 1)``, new moon
    at 0 and full moon at 0.5.
    """

    harmonious, challenging = profile.harmonious, profile.challenging
    if profile.has("pluto") and profile.has("mars"):
        return _M.RAW
    if profile.has("pluto"):
        return _M.VOLATILE
    if profile.has("uranus"):
        return _M.ELECTRIC
    if profile.has("neptune"):
        return _M.DISSOLVING
    if profile.has("saturn") and challenging > harmonious:
        return _M.STILL
    if profile.has("venus") and profile.has("mars"):
        return _M.MAGNETIC
    if profile.has("venus") and harmonious >= challenging:
        return _M.TENDER
    if profile.has("mars") and challenging > 0:
        return _M.RESTLESS
    if 0.45 < cycle_fraction < 0.55:
        return _M.MAGNETIC if harmonious > challenging else _M.VOLATILE
    if cycle_fraction < 0.05 or cycle_fraction > 0.95:
        return _M.STILL
    if harmonious >= 3 and challenging <= 1:
        return _M.EXPANDING
    if synastry_score >= 70 and harmonious > challenging:
        return _M.FATED
    if challenging > harmonious + 1:
        return _M.RESTLESS
    if profile.venus_retrograde:
        return _M.RAW
    return _M.TENDER if harmonious > 0 else _M.STILL


def calculate_pulse(profile: TransitProfile, synastry_score: int) -> int:
    pulse = synastry_score * 0.4
    pulse += profile.harmonious * 5
    pulse += profile.exact * 4
    # challenges add intensity, not distance
    pulse += profile.challenging * 2
    if profile.has("venus") and profile.has("mars"):
        pulse += 10
    if profile.venus_retrograde:
        pulse -= 8
    if profile.has("moon"):
        pulse += 3
    low, high = PULSE_RANGE
    return int(clamp(round_half_up(pulse), low, high))


def mood_from_synastry(report: SynastryReport) -> BondMood:
    """Mood from the static report alone, led by its top theme."""

    top = report.themes[0].theme if report.themes else None
    if report.score >= 80:
        return _M.FATED
    if report.score >= 65:
        if top in (Theme.PASSION, Theme.ATTRACTION):
            return _M.MAGNETIC
        if top in (Theme.SOUL, Theme.DESTINY):
            return _M.FATED
        return _M.EXPANDING
    if report.score >= 45:
        if top is Theme.EMOTIONAL:
            return _M.TENDER
        if top is Theme.CHAOS:
            return _M.RESTLESS
        return _M.STILL
    if top is Theme.TRANSFORMATION:
        return _M.RAW
    return _M.STILL


def fallback_pulse(synastry_score: int) -> int:
    low, high = FALLBACK_PULSE_RANGE
    return int(clamp(round_half_up(synastry_score * 0.6 + 20), low, high))


def _transit_lines(profile: TransitProfile, names: tuple[str, str], seed: int) -> list[str]:
    ranked: list[tuple[float, str]] = []
    for scored in profile.top_transits[:LINE_CANDIDATES]:
        aspect = scored.transit
        template = _pick(_TRANSIT_TEMPLATES[(aspect.is_exact, aspect.aspect in HARMONIOUS)], seed)
        text = template.format(
            body=_oracle_name(aspect.body_a),
            natal=_oracle_name(aspect.body_b),
            person=names[scored.person - 1],
        )
        ranked.append((scored.relevance, _sentence(text)))
    if profile.venus_retrograde and len(ranked) < LINE_LIMIT:
        ranked.append((VENUS_RETROGRADE_RELEVANCE, VENUS_RETROGRADE_LINE))
    ranked.sort(key=lambda item: item[0], reverse=True)
    return [text for _, text in ranked[:LINE_LIMIT]]


def _ruler_line(ruler: str, mood: BondMood) -> str:
    return _sentence(RULER_LINES[mood].format(ruler=_oracle_name(ruler)))


_SUFFIXES: Mapping[int, str] = MappingProxyType({1: "st", 2: "nd", 3: "rd"})


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        return f"{n}th"
    return f"{n}{_SUFFIXES.get(n % 10, 'th')}"


def _moon_house_line(moon_longitude: float, charts: Sequence[Any]) -> str | None:
    parts = []
    for chart in charts:
        # equal houses need a known birth time
        if not getattr(chart, "time_known", False):
            continue
        number = house(moon_longitude, chart.ascendant)
        if number in KEY_HOUSES:
            parts.append(f"Moon transits {chart.name}'s {_ordinal(number)} house")
    return " · ".join(parts) + "." if parts else None


def _phase_fields(phase: MoonPhase | None) -> tuple[str, int, float]:
    if phase is None:
        return "the sky", 50, UNKNOWN_CYCLE_FRACTION
    return phase.name.lower(), int(round_half_up(phase.illumination * 100)), phase.cycle_fraction


def todays_bond(
    chart_a: Any,
    chart_b: Any,
    report: SynastryReport,
    instant: Instant | None = None,
    provider: LongitudeProvider | None = None,
    *,
    orbs: OrbTable = TRANSIT_ORBS,
) -> TodaysBond:
    """Read the day's bond between two charts.

    Parameters
    ----------
    chart_a, chart_b:
        Natal charts of the pair, in the order used for ``report``.
    report:
        Their synastry report; its score anchors the pulse.
    instant:
        Moment of the reading; the current UTC time when omitted.
    provider:
        Longitude provider for the current sky.
    orbs:
        Orb table applied to transit-to-natal contacts.

    Returns
    -------
    TodaysBond
        ``from_sky`` is ``False`` when the provider failed and the reading
        fell back to the synastry report alone.
    """

    provider = provider or default_provider()
    instant = instant or Instant.now()
    seed = day_seed(instant)
    ruler = day_ruler(instant).ruler
    names = (getattr(chart_a, "name", ""), getattr(chart_b, "name", ""))

    sky: Mapping[str, BodyPosition] | None
    try:
        sky = sky_positions(instant.julian_day, PLANETS, provider)
    except ProviderError as exc:
        LOG.warning("Sky unavailable for bond of %r and %r, using synastry only: %s", *names, exc)
        sky = None

    phase = None
    if sky is not None and "sun" in sky and "moon" in sky:
        phase = moon_phase(sky["sun"].longitude, sky["moon"].longitude)
    phase_name, illumination, cycle_fraction = _phase_fields(phase)

    if sky is not None:
        profile = profile_transits(chart_a, chart_b, sky, orbs=orbs)
        mood = determine_mood(profile, report.score, cycle_fraction)
        pulse = calculate_pulse(profile, report.score)
        lines = _transit_lines(profile, names, seed) or [_ruler_line(ruler, mood)]
        if "moon" in sky and len(lines) < LINE_LIMIT:
            context = _moon_house_line(sky["moon"].longitude, (chart_a, chart_b))
            if context:
                lines.append(context)
    else:
        mood = mood_from_synastry(report)
        pulse = fallback_pulse(report.score)
        lines = [_ruler_line(ruler, mood)]

    bond = TodaysBond(
        person_a=names[0],
        person_b=names[1],
        mood=mood,
        pulse=pulse,
        transit_lines=tuple(lines),
        ritual=_pick(RITUALS[mood], seed),
        moon_phase=phase_name,
        moon_illumination=illumination,
        day_ruler=ruler,
        from_sky=sky is not None,
    )
    BOND_READINGS.labels(mood=mood.value).inc()
    LOG.debug(
        "Bond %r x %r on %d: mood=%s pulse=%d from_sky=%s",
        names[0],
        names[1],
        seed,
        mood.value,
        pulse,
        bond.from_sky,
    )
    return bond
