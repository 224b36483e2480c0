"""Utilities shared across the SeerEngine test suites."""

from .factories import (
    SAMPLE_LONGITUDES,
    SAMPLE_SPEEDS,
    LinearEphemeris,
    StubChart,
    make_aspect,
    make_key_transit,
    make_report,
)

__all__ = [
    "SAMPLE_LONGITUDES",
    "SAMPLE_SPEEDS",
    "LinearEphemeris",
    "StubChart",
    "make_aspect",
    "make_key_transit",
    "make_report",
]
