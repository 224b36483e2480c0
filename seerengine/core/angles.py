"""Angular utilities shared across chart, transit and synastry calculations.

Longitudes are compared against aspect targets throughout the engine.
Doing so with raw modulo arithmetic invites subtle bugs around the
0°/360° boundary, so the helpers in this module centralise degree
normalisation and the shortest-path separation between two longitudes.

The :func:`classify_relative_motion` helper also encapsulates the
applying vs. separating decision so transit and synastry code reason
about contacts consistently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

__all__ = [
    "AspectMotion",
    "angular_distance",
    "classify_relative_motion",
    "delta_angle",
    "normalize_degrees",
    "signed_delta",
]


EPSILON_DEG: Final[float] = 1e-9


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Parameters
    ----------
    angle:
        Value in **degrees**. Inputs outside the canonical range are
        wrapped by multiples of 360°.

    Returns
    -------
    float
        A degree value in ``[0, 360)``. Values within ``1e-9`` of
        ``360`` are coerced to ``0`` so sign lookups never see a
        thirteenth sign.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped if wrapped >= 0.0 else wrapped + 360.0


def signed_delta(angle: float) -> float:
    """Return ``angle`` wrapped to the ``[-180, 180)`` interval."""

    wrapped = normalize_degrees(angle)
    if wrapped >= 180.0:
        return wrapped - 360.0
    return wrapped


def delta_angle(a: float, b: float) -> float:
    """Return the signed shortest-path difference ``b - a`` in degrees."""

    return signed_delta(float(b) - float(a))


def angular_distance(a: float, b: float) -> float:
    """Return the unsigned separation between two longitudes in ``[0, 180]``.

    The result is symmetric in its arguments, which keeps aspect
    detection independent of which chart is treated as the reference.
    """

    diff = abs(normalize_degrees(a) - normalize_degrees(b))
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


@dataclass(frozen=True)
class AspectMotion:
    """Classify the relative motion around an aspect target."""

    state: str
    orb_now: float
    orb_next: float

    @property
    def is_applying(self) -> bool:
        return self.state == "applying"

    @property
    def is_separating(self) -> bool:
        return self.state == "separating"


def classify_relative_motion(
    moving_longitude: float,
    moving_speed: float,
    reference_longitude: float,
    target_angle: float,
    *,
    step_days: float = 0.1,
) -> AspectMotion:
    """Return whether a contact is applying or separating.

    The moving body is advanced along its daily ``moving_speed`` for
    ``step_days``; the contact is applying when the orb shrinks. Bodies
    with zero speed are reported as separating (static contacts never
    perfect).
    """

    orb_now = abs(angular_distance(moving_longitude, reference_longitude) - target_angle)
    advanced = moving_longitude + moving_speed * step_days
    orb_next = abs(angular_distance(advanced, reference_longitude) - target_angle)
    state = "applying" if orb_next < orb_now else "separating"
    return AspectMotion(state=state, orb_now=orb_now, orb_next=orb_next)
