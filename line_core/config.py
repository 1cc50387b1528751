"""
Server Configuration

Reads every setting from the process environment once, at startup.
Nothing below the bootstrap ever calls os.getenv again; the resulting
ServerConfig is passed down explicitly.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from line_core.line_client import LINE_API_BASE_URL

TOKEN_ENV_VAR = "LINE_CHANNEL_ACCESS_TOKEN"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when the environment cannot produce a usable configuration."""


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the LINE MCP server"""

    # Never printed: repr=False keeps the token out of logs and tracebacks.
    channel_access_token: str = field(repr=False)

    api_base_url: str = LINE_API_BASE_URL
    request_timeout: Optional[float] = 30.0

    # Report tool failures as protocol errors instead of inside the envelope
    strict_errors: bool = False

    log_level: str = "INFO"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got {raw!r}")


def _parse_timeout(name: str, raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from None
    return value if value > 0 else None


def load_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """
    Build the server configuration from environment variables.

    Args:
        environ: Mapping to read from; defaults to os.environ.

    Returns:
        ServerConfig: Immutable configuration object

    Raises:
        ConfigurationError: If LINE_CHANNEL_ACCESS_TOKEN is missing or empty,
            or if an optional setting cannot be parsed
    """
    env = os.environ if environ is None else environ

    token = env.get(TOKEN_ENV_VAR, "").strip()
    if not token:
        raise ConfigurationError(f"Please set {TOKEN_ENV_VAR} environment variable")

    return ServerConfig(
        channel_access_token=token,
        api_base_url=env.get("LINE_API_BASE_URL", LINE_API_BASE_URL),
        request_timeout=_parse_timeout("LINE_API_TIMEOUT", env.get("LINE_API_TIMEOUT", "30")),
        strict_errors=_parse_bool("LINE_MCP_STRICT_ERRORS", env.get("LINE_MCP_STRICT_ERRORS", "false")),
        log_level=env.get("LINE_MCP_LOG_LEVEL", "INFO").upper(),
    )
