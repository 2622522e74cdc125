# =============================================================================
# comexstat/config.py - Runtime Settings
# =============================================================================
#
# All knobs come from environment variables (main.py loads a .env file into
# the environment first).  Settings are read once at startup and frozen;
# nothing in the request path re-reads the environment.
#
#   COMEXSTAT_API_URL        upstream base URL
#   COMEXSTAT_TIMEOUT_MS     per-request timeout, milliseconds
#   COMEXSTAT_VERIFY_TLS     "false" turns certificate verification off
#   COMEXSTAT_MAX_REDIRECTS  redirect hop limit
#   LOG_LEVEL                DEBUG / INFO / WARNING / ...
#   COMEXSTAT_HTTP_MODE      "true" serves over HTTP instead of stdio
#   MCP_HOST, MCP_PORT       bind address for HTTP mode
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from comexstat.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api-comexstat.mdic.gov.br"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_REDIRECTS = 5

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Everything the process needs to know about its environment."""

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    verify_tls: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    log_level: str = "INFO"
    http_mode: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from `environ` (defaults to os.environ)."""
        env = os.environ if environ is None else environ
        return cls(
            base_url=(env.get("COMEXSTAT_API_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_ms=_positive_int(env, "COMEXSTAT_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            verify_tls=_flag(env, "COMEXSTAT_VERIFY_TLS", True),
            max_redirects=_non_negative_int(env, "COMEXSTAT_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            http_mode=_flag(env, "COMEXSTAT_HTTP_MODE", False),
            host=env.get("MCP_HOST") or "127.0.0.1",
            port=_positive_int(env, "MCP_PORT", 8000),
        )


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(name, raw, "true/false")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(name, raw, "an integer") from None


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = _int(env, name, default)
    if value <= 0:
        raise ConfigurationError(name, str(value), "a positive integer")
    return value


def _non_negative_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = _int(env, name, default)
    if value < 0:
        raise ConfigurationError(name, str(value), "zero or a positive integer")
    return value
