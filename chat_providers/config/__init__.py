"""Layered configuration for chat adapters.

Sources, later wins:
    1. Built-in defaults (``DEFAULTS``)
    2. External config file (JSON or YAML) named by ``CHAT_PROVIDERS_CONFIG_FILE``
    3. Environment variables (``<ADAPTER>_API_KEY``, ``_MODEL``, ``_BASE_URL``)
    4. Explicit overrides passed by the caller

File structure example (YAML)::

    adapter: gemini
    gemini:
      model_key: gemini-1.5-pro
      safety_threshold: BLOCK_ONLY_HIGH
    azure:
      deployment: my-gpt4o
      api_version: "2024-02-01"

Public API
----------
* ``get_adapter_config(name, overrides=None) -> dict``
* ``load_settings(overrides=None) -> ChatModelSettings``
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..base.dto.settings import ChatModelSettings
from ..base.errors_parts.provider_error import ConfigurationError
from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    AZURE_DEFAULT_API_VERSION,
    COHERE_DEFAULT_BASE_URL,
    COHERE_DEFAULT_MODEL,
    DEFAULT_ADAPTER,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    GROQ_DEFAULT_BASE_URL,
    GROQ_DEFAULT_MODEL,
    LM_STUDIO_DEFAULT_BASE_URL,
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    XAI_DEFAULT_BASE_URL,
    XAI_DEFAULT_MODEL,
)
from .env import env_overrides, is_placeholder

CONFIG_FILE_ENV = "CHAT_PROVIDERS_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model_key": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"model_key": ANTHROPIC_DEFAULT_MODEL, "base_url": ANTHROPIC_DEFAULT_BASE_URL},
    "gemini": {"model_key": GEMINI_DEFAULT_MODEL, "base_url": GEMINI_DEFAULT_BASE_URL},
    "cohere": {"model_key": COHERE_DEFAULT_MODEL, "base_url": COHERE_DEFAULT_BASE_URL},
    "azure": {"api_version": AZURE_DEFAULT_API_VERSION},
    "openrouter": {"model_key": OPENROUTER_DEFAULT_MODEL, "base_url": OPENROUTER_DEFAULT_BASE_URL},
    "groq": {"model_key": GROQ_DEFAULT_MODEL, "base_url": GROQ_DEFAULT_BASE_URL},
    "xai": {"model_key": XAI_DEFAULT_MODEL, "base_url": XAI_DEFAULT_BASE_URL},
    "ollama": {"model_key": OLLAMA_DEFAULT_MODEL, "base_url": OLLAMA_DEFAULT_HOST},
    "lm_studio": {"base_url": LM_STUDIO_DEFAULT_BASE_URL},
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _parse_config_text(text: str, path: Path) -> Dict[str, Any]:
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    return data


def load_config_file() -> Dict[str, Any]:
    """Return the parsed external config file (cached per path).

    A missing variable or missing file yields ``{}``; a malformed file raises
    :class:`ConfigurationError`.
    """
    global _FILE_CACHE, _FILE_CACHE_PATH  # noqa: PLW0603 - module cache
    path = os.getenv(CONFIG_FILE_ENV)
    if _FILE_CACHE is not None and path == _FILE_CACHE_PATH:
        return _FILE_CACHE
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        p = Path(path)
        try:
            data = _parse_config_text(p.read_text(encoding="utf-8"), p)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"cannot parse config file {path}: {exc}") from exc
    _FILE_CACHE, _FILE_CACHE_PATH = data, path
    return data


def clear_config_cache() -> None:
    global _FILE_CACHE, _FILE_CACHE_PATH  # noqa: PLW0603 - module cache
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None


def get_adapter_config(adapter: str, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged configuration section for one adapter.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    """
    name = (adapter or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = load_config_file().get(name)
    if isinstance(file_cfg, Mapping):
        cfg |= dict(file_cfg)
    cfg |= env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key")
    return cfg


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    adapter: Optional[str] = None,
) -> ChatModelSettings:
    """Build validated settings covering every known adapter section.

    ``overrides`` has the settings shape (``{"adapter": ..., "<name>": {...}}``);
    ``adapter`` selects the active adapter explicitly. Adapter sections present
    only in the file or overrides (e.g. ``custom``) are included too.
    """
    overrides = dict(overrides or {})
    file_cfg = load_config_file()
    active = adapter or overrides.get("adapter") or file_cfg.get("adapter") or DEFAULT_ADAPTER
    names = set(DEFAULTS)
    names |= {k for k, v in file_cfg.items() if isinstance(v, Mapping)}
    names |= {k for k, v in overrides.items() if isinstance(v, Mapping)}
    data: Dict[str, Any] = {"adapter": active}
    for name in sorted(names):
        data[name] = get_adapter_config(name, overrides.get(name))
    return ChatModelSettings.from_mapping(data)


__all__ = [
    "DEFAULTS",
    "CONFIG_FILE_ENV",
    "get_adapter_config",
    "load_settings",
    "load_config_file",
    "clear_config_cache",
]
