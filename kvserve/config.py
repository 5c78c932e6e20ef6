"""Server settings read from environment variables, with defaults."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


@dataclass(frozen=True)
class NetworkConfig:
    """Where the server listens."""

    host: str = "localhost"
    port: int = 6379


@dataclass(frozen=True)
class PerformanceConfig:
    """Limits on server resources."""

    max_connections: int = 1000


@dataclass(frozen=True)
class MaintenanceConfig:
    """Settings of background housekeeping."""

    expiration_check_interval: float = 1.0


@dataclass(frozen=True)
class ServerConfig:
    """All server settings."""

    network: NetworkConfig = field(default_factory=NetworkConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    maintenance: MaintenanceConfig = field(default_factory=MaintenanceConfig)


def _env_string(environ: Mapping[str, str], key: str, default: str) -> str:
    return environ.get(key, "") or default


def _env_integer(environ: Mapping[str, str], key: str, default: int) -> int:
    text = environ.get(key, "")
    if not text or not _INTEGER.fullmatch(text):
        return default
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return default
    return value


def load_server_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build the configuration from ``environ`` (the process environment by default).

    Empty or unparsable values fall back to the defaults.
    """
    env = os.environ if environ is None else environ
    return ServerConfig(
        network=NetworkConfig(
            host=_env_string(env, "REDIS_HOST", "localhost"),
            port=_env_integer(env, "REDIS_PORT", 6379),
        ),
        performance=PerformanceConfig(
            max_connections=_env_integer(env, "REDIS_MAX_CONNECTIONS", 1000),
        ),
        maintenance=MaintenanceConfig(
            expiration_check_interval=float(
                _env_integer(env, "REDIS_EXPIRATION_CHECK_INTERVAL", 1)
            ),
        ),
    )