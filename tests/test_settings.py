import pytest

from settings import Settings
from settings import _env_flag
from settings import _env_float


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("1", True), (" Yes ", True), ("false", False), ("0", False), ("", False)],
)
def test_env_flag(monkeypatch, value, expected):
    monkeypatch.setenv("CLICKSIGN_RAISE_FOR_STATUS", value)

    assert _env_flag("CLICKSIGN_RAISE_FOR_STATUS") is expected


def test_env_flag_default(monkeypatch):
    monkeypatch.delenv("CLICKSIGN_RAISE_FOR_STATUS", raising=False)

    assert _env_flag("CLICKSIGN_RAISE_FOR_STATUS") is False


def test_env_float(monkeypatch):
    monkeypatch.setenv("CLICKSIGN_TIMEOUT", "12.5")
    assert _env_float("CLICKSIGN_TIMEOUT") == 12.5

    monkeypatch.setenv("CLICKSIGN_TIMEOUT", " ")
    assert _env_float("CLICKSIGN_TIMEOUT") is None

    monkeypatch.delenv("CLICKSIGN_TIMEOUT")
    assert _env_float("CLICKSIGN_TIMEOUT") is None


def test_get_clicksign_config(monkeypatch):
    monkeypatch.setattr(Settings, "CLICKSIGN_TOKEN", "secret")
    monkeypatch.setattr(Settings, "CLICKSIGN_BASE_URL", "https://api.clicksign.com")
    monkeypatch.setattr(Settings, "CLICKSIGN_API_VERSION", "v1")
    monkeypatch.setattr(Settings, "CLICKSIGN_TIMEOUT", None)
    monkeypatch.setattr(Settings, "CLICKSIGN_MAX_WORKERS", 4)
    monkeypatch.setattr(Settings, "CLICKSIGN_RAISE_FOR_STATUS", False)

    assert Settings.get_clicksign_config() == {
        "access_token": "secret",
        "base_url": "https://api.clicksign.com",
        "api_version": "v1",
        "timeout": None,
        "max_workers": 4,
        "raise_for_status": False,
    }


@pytest.mark.parametrize("token, expected", [("secret", True), ("   ", False), (None, False)])
def test_validate_clicksign_config(monkeypatch, token, expected):
    monkeypatch.setattr(Settings, "CLICKSIGN_TOKEN", token)

    assert Settings.validate_clicksign_config() is expected


def test_get_clicksign_config_without_token(monkeypatch):
    monkeypatch.setattr(Settings, "CLICKSIGN_TOKEN", None)

    assert Settings.get_clicksign_config()["access_token"] is None


def test_is_production(monkeypatch):
    monkeypatch.setattr(Settings, "ENVIRONMENT", "Production")
    assert Settings.is_production() is True

    monkeypatch.setattr(Settings, "ENVIRONMENT", "development")
    assert Settings.is_production() is False
