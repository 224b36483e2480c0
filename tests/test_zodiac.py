from __future__ import annotations

import pytest

from seerengine.core.bodies import body_class, canonical_name, display_name
from seerengine.core.zodiac import element_of, modality_of, sign_and_degree, sign_index


@pytest.mark.parametrize(
    "longitude, sign, degree",
    [
        (0.0, "Aries", 0.0),
        (45.5, "Taurus", 15.5),
        (359.99, "Pisces", 29.99),
        (-1.0, "Pisces", 29.0),
        (360.0, "Aries", 0.0),
        (270.0, "Capricorn", 0.0),
    ],
)
def test_sign_and_degree(longitude: float, sign: str, degree: float) -> None:
    position = sign_and_degree(longitude)
    assert position.sign == sign
    assert position.degree == pytest.approx(degree)
    assert 0.0 <= position.degree < 30.0


def test_sign_label_uses_arcminutes() -> None:
    position = sign_and_degree(45.5)
    assert position.arcminute == 30
    assert position.label() == "15°30' Taurus"


def test_sign_index_matches_decomposition() -> None:
    assert sign_index(125.0) == sign_and_degree(125.0).sign_index == 4


@pytest.mark.parametrize(
    "sign, element, modality",
    [
        ("Aries", "fire", "cardinal"),
        ("Taurus", "earth", "fixed"),
        ("Gemini", "air", "mutable"),
        ("cancer", "water", "cardinal"),
        (4, "fire", "fixed"),
        (11, "water", "mutable"),
    ],
)
def test_element_and_modality(sign: str | int, element: str, modality: str) -> None:
    assert element_of(sign) == element
    assert modality_of(sign) == modality


def test_unknown_sign_is_rejected() -> None:
    with pytest.raises(ValueError):
        element_of("Ophiuchus")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Sun", "sun"),
        ("North Node", "north_node"),
        ("northNode", "north_node"),
        ("MC", "midheaven"),
        ("Part of Fortune", "fortune"),
        ("vesta", "vesta"),
    ],
)
def test_canonical_name(raw: str, expected: str) -> None:
    assert canonical_name(raw) == expected


def test_display_name_and_class() -> None:
    assert display_name("north_node") == "North Node"
    assert display_name("mars") == "Mars"
    assert body_class("Sun") == "luminary"
    assert body_class("vesta") is None
