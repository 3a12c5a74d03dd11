"""Test class ServiceSettings."""
from pydantic import ValidationError
import pytest

from calculator_service.common.config import ServiceSettings


def test_defaults() -> None:
    """An empty environment yields the defaults."""
    settings = ServiceSettings.from_env({})
    assert str(settings.host) == "127.0.0.1"
    assert settings.port == 8000
    assert settings.threaded is True
    assert settings.log_level == "INFO"


def test_reads_environment() -> None:
    """CALCULATOR_* variables populate the settings."""
    settings = ServiceSettings.from_env({
        "CALCULATOR_HOST": "0.0.0.0",
        "CALCULATOR_PORT": "8080",
        "CALCULATOR_THREADED": "false",
        "CALCULATOR_LOG_LEVEL": "debug",
    })
    assert str(settings.host) == "0.0.0.0"
    assert settings.port == 8080
    assert settings.threaded is False
    assert settings.log_level == "DEBUG"


def test_overrides_win_over_environment() -> None:
    """Explicit overrides replace environment values, None falls back."""
    settings = ServiceSettings.from_env({"CALCULATOR_PORT": "8080"}, port=9000, host=None)
    assert settings.port == 9000
    assert str(settings.host) == "127.0.0.1"


def test_blank_variables_are_ignored() -> None:
    """Empty variables do not override defaults."""
    assert ServiceSettings.from_env({"CALCULATOR_PORT": ""}).port == 8000


def test_reads_os_environ(monkeypatch) -> None:
    """os.environ is used when no mapping is given."""
    monkeypatch.setenv("CALCULATOR_PORT", "8111")
    assert ServiceSettings.from_env().port == 8111


@pytest.mark.parametrize("env", [
    {"CALCULATOR_PORT": "0"},
    {"CALCULATOR_PORT": "not-a-port"},
    {"CALCULATOR_HOST": "localhost.invalid"},
    {"CALCULATOR_LOG_LEVEL": "verbose"},
])
def test_invalid_values(env: dict) -> None:
    """Invalid values raise a ValidationError."""
    with pytest.raises(ValidationError):
        ServiceSettings.from_env(env)
