"""Timeout configuration for the HTTP transport.

Values come from the environment on first use and are cached afterwards;
``reset_timeout_cache`` drops the cache (tests adjust the environment).

Environment variables (all optional, positive floats):
    CHAT_PROVIDERS_HTTP_TIMEOUT_SECONDS     read/write timeout per request
    CHAT_PROVIDERS_CONNECT_TIMEOUT_SECONDS  connection establishment
    CHAT_PROVIDERS_STREAM_TIMEOUT_SECONDS   idle wait between stream frames
"""
from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds."""

    http_timeout_seconds: float = 60.0
    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 120.0


_CACHED: TimeoutConfig | None = None


def _parse_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - module cache
    if _CACHED is None:
        base = TimeoutConfig()
        _CACHED = TimeoutConfig(
            http_timeout_seconds=_parse_env_float("CHAT_PROVIDERS_HTTP_TIMEOUT_SECONDS", base.http_timeout_seconds),
            connect_timeout_seconds=_parse_env_float(
                "CHAT_PROVIDERS_CONNECT_TIMEOUT_SECONDS", base.connect_timeout_seconds
            ),
            stream_timeout_seconds=_parse_env_float(
                "CHAT_PROVIDERS_STREAM_TIMEOUT_SECONDS", base.stream_timeout_seconds
            ),
        )
    return _CACHED


def reset_timeout_cache() -> None:
    global _CACHED  # noqa: PLW0603 - module cache
    _CACHED = None


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_cache"]
