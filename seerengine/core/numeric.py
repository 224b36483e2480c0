"""Small numeric helpers shared by the scoring layers."""

from __future__ import annotations

import math

__all__ = ["clamp", "round_half_up"]


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves towards +inf (``2.5 -> 3``, ``-2.5 -> -2``).

    Python's built-in :func:`round` uses banker's rounding, which would
    move scores sitting exactly on a half point downwards.
    """

    factor = 10.0**ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
