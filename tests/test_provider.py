from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from seerengine.core.time import J2000
from seerengine.ephemeris import provider as provider_module
from seerengine.ephemeris.positions import BodyPosition, body_position, sky_positions
from seerengine.ephemeris.provider import (
    ClosedFormProvider,
    LongitudeProvider,
    default_provider,
    get_provider,
    list_providers,
    register_provider,
)
from seerengine.exceptions import ProviderError, UnsupportedBodyError
from seerengine.observability.metrics import PROVIDER_FAILURES, ensure_metrics_registered
from tests.helpers import LinearEphemeris


@pytest.fixture
def isolated_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(provider_module, "_REGISTRY", dict(provider_module._REGISTRY))


def test_default_provider_is_closed_form() -> None:
    provider = default_provider()
    assert isinstance(provider, ClosedFormProvider)
    assert isinstance(provider, LongitudeProvider)
    assert get_provider("closed_form") is provider
    assert get_provider(" Closed_Form ") is provider
    assert provider.supports("Sun")
    assert not provider.supports("chiron")


def test_unknown_provider_name(isolated_registry: None) -> None:
    with pytest.raises(ProviderError) as excinfo:
        get_provider("astrolabe")
    assert excinfo.value.error_code == "not_registered"
    assert "closed_form" in excinfo.value.context["available"]


def test_register_provider(isolated_registry: None) -> None:
    linear = LinearEphemeris(base={"sun": 0.0})
    register_provider("Linear", linear)
    assert "linear" in list_providers()
    assert get_provider("linear") is linear


def test_register_rejects_non_providers(isolated_registry: None) -> None:
    with pytest.raises(TypeError):
        register_provider("broken", object())  # type: ignore[arg-type]


def test_unsupported_body_counts_a_provider_failure() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"provider_id": "closed_form", "error_code": "unsupported_body"}
    before = registry.get_sample_value("seerengine_provider_failures_total", labels) or 0.0

    with pytest.raises(UnsupportedBodyError):
        ClosedFormProvider()("chiron", J2000)

    after = registry.get_sample_value("seerengine_provider_failures_total", labels)
    assert after == before + 1.0


def test_body_position_derives_sign_and_motion() -> None:
    provider = LinearEphemeris(base={"mercury": 29.9}, rates={"mercury": -0.8})
    position = body_position("Mercury", J2000, provider)
    assert position.body == "mercury"
    assert position.sign == "Aries"
    assert position.speed == pytest.approx(-0.8)
    assert position.retrograde


def test_luminaries_are_never_flagged_retrograde() -> None:
    assert not BodyPosition(body="moon", longitude=10.0, speed=-1.0).retrograde
    assert BodyPosition(body="north_node", longitude=10.0, speed=-0.05).retrograde


def test_body_position_normalises_longitude() -> None:
    position = BodyPosition(body="venus", longitude=-15.0)
    assert position.longitude == pytest.approx(345.0)
    assert position.sign == "Pisces"
    assert position.sign_index == 11
    assert position.as_dict()["sign"] == "Pisces"


def test_sky_positions_skip_unsupported_bodies() -> None:
    sky = sky_positions(J2000, ["sun", "chiron", "Moon"])
    assert set(sky) == {"sun", "moon"}


def test_swiss_provider_when_installed(isolated_registry: None) -> None:
    pytest.importorskip("swisseph")
    swiss = get_provider("swiss")
    assert swiss.supports("chiron")
    assert swiss("sun", J2000) == pytest.approx(280.37, abs=0.1)
    assert swiss("south_node", J2000) == pytest.approx((swiss("north_node", J2000) + 180.0) % 360.0)
