"""
Unit tests - settings from environment.
"""
import pytest

from comexstat.config import DEFAULT_BASE_URL, Settings
from comexstat.errors import ConfigurationError


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout_ms == 30000
    assert settings.timeout_seconds == 30.0
    assert settings.verify_tls is True
    assert settings.max_redirects == 5
    assert settings.log_level == "INFO"
    assert settings.http_mode is False
    assert (settings.host, settings.port) == ("127.0.0.1", 8000)


def test_overrides():
    settings = Settings.from_env({
        "COMEXSTAT_API_URL": "https://mirror.example/api/",
        "COMEXSTAT_TIMEOUT_MS": "5000",
        "COMEXSTAT_VERIFY_TLS": "false",
        "COMEXSTAT_MAX_REDIRECTS": "0",
        "LOG_LEVEL": "debug",
        "COMEXSTAT_HTTP_MODE": "yes",
        "MCP_HOST": "0.0.0.0",
        "MCP_PORT": "9000",
    })
    assert settings.base_url == "https://mirror.example/api"
    assert settings.timeout_seconds == 5.0
    assert settings.verify_tls is False
    assert settings.max_redirects == 0
    assert settings.log_level == "DEBUG"
    assert settings.http_mode is True
    assert (settings.host, settings.port) == ("0.0.0.0", 9000)


def test_blank_values_fall_back_to_defaults():
    settings = Settings.from_env({"COMEXSTAT_TIMEOUT_MS": " ", "COMEXSTAT_VERIFY_TLS": ""})
    assert settings.timeout_ms == 30000
    assert settings.verify_tls is True


@pytest.mark.parametrize("env,variable", [
    ({"COMEXSTAT_TIMEOUT_MS": "fast"}, "COMEXSTAT_TIMEOUT_MS"),
    ({"COMEXSTAT_TIMEOUT_MS": "0"}, "COMEXSTAT_TIMEOUT_MS"),
    ({"COMEXSTAT_MAX_REDIRECTS": "-1"}, "COMEXSTAT_MAX_REDIRECTS"),
    ({"COMEXSTAT_VERIFY_TLS": "maybe"}, "COMEXSTAT_VERIFY_TLS"),
    ({"MCP_PORT": "http"}, "MCP_PORT"),
])
def test_invalid_values_raise(env, variable):
    with pytest.raises(ConfigurationError) as excinfo:
        Settings.from_env(env)
    assert excinfo.value.variable == variable


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("COMEXSTAT_TIMEOUT_MS", "1234")
    assert Settings.from_env().timeout_ms == 1234
