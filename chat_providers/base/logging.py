"""Structured logging for the chat layer.

All loggers under ``chat_providers`` propagate to one shared logger that owns
a single stderr handler with :class:`JsonFormatter`. The level comes from
``CHAT_PROVIDERS_LOG_LEVEL`` (default INFO). ``configure_logger`` adjusts the
level at runtime and attaches or removes a rotating file handler.

Event names emitted by the package:
``adapter.load``, ``adapter.unload``, ``registry.reload``, ``registry.switch``,
``request.start``, ``request.end``, ``request.error``, ``request.abort``,
``stream.first_delta``.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER = "chat_providers"
LEVEL_ENV = "CHAT_PROVIDERS_LOG_LEVEL"

_CONSOLE_ATTR = "_chat_console_handler"
_FILE_ATTR = "_chat_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a level name (case-insensitive); unknown names fall back to ``default``."""
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_root(json_mode: bool) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    level = _parse_level(os.getenv(LEVEL_ENV), default=logging.INFO)
    console = [h for h in logger.handlers if getattr(h, _CONSOLE_ATTR, False)]
    if not console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_formatter(json_mode))
        setattr(handler, _CONSOLE_ATTR, True)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER, json_mode: bool = True) -> logging.Logger:
    """Return ``name`` as a child of the shared logger, initializing it once."""
    root = _ensure_root(json_mode)
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level (number or name). ``None`` keeps the current level.
    file_path: Optional[str]
        Attach a rotating file handler writing to this path. ``None`` removes
        any file handler previously attached here; user handlers are untouched.
    json_mode: bool
        JSON (default) or plain text formatting for the file handler.
    """
    logger = _ensure_root(json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, logger.level) if isinstance(level, str) else level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_ATTR, False)]
    if file_path is None:
        for handler in managed:
            logger.removeHandler(handler)
            handler.close()
        return logger

    abs_path = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    existing = None
    for handler in managed:
        if getattr(handler, "baseFilename", None) == abs_path:
            existing = handler
        else:
            logger.removeHandler(handler)
            handler.close()
    if existing is None:
        existing = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(existing, _FILE_ATTR, True)
        logger.addHandler(existing)
    existing.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit one structured event as a JSON message.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("phase", "error_kind", "emitted", "duration_ms")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    error_kind: str | None = None,
    emitted: int | None = None,
    duration_ms: float | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event that always carries the request lifecycle keys.

    ``phase``, ``emitted`` and ``duration_ms`` are always present (possibly
    ``null``); ``error_kind`` only when an error occurred. Extra fields never
    overwrite the normalized ones.
    """
    fields: Dict[str, Any] = {
        "phase": phase,
        "emitted": emitted,
        "duration_ms": None if duration_ms is None else round(duration_ms, 2),
    }
    if error_kind is not None:
        fields["error_kind"] = error_kind
    for key, value in extra_fields.items():
        if value is not None and key not in fields:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


def close_handlers() -> None:
    """Close and detach every handler managed by this module (test helper)."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_ATTR, False) or getattr(handler, _FILE_ATTR, False):
            logger.removeHandler(handler)
            with contextlib.suppress(OSError):
                handler.close()


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "close_handlers",
    "REQUIRED_NORMALIZED_KEYS",
]
