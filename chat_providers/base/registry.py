"""Adapter registry and lifecycle.

Purpose
-------
Resolve an adapter name to a constructed :class:`ChatAdapter` using the
current settings. Adapters are imported lazily with ``importlib`` from a
name -> ``{module, class}`` table and constructed on first use.

Lifecycle
---------
Per adapter name: ``UNLOADED -> ACTIVE`` on first :meth:`get`;
``ACTIVE -> UNLOADED`` on :meth:`reload` (new settings) or :meth:`unload`.
Re-entering ``ACTIVE`` constructs a fresh instance from the latest settings.
A reload never mutates an existing instance: callers (and in-flight
requests) holding the previous instance keep using it unchanged.

Failure modes
-------------
Unknown adapter names, names without a settings section, import failures and
constructor errors all raise :class:`ConfigurationError` before any network
call.
"""

from __future__ import annotations

import threading
from enum import Enum
from importlib import import_module
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from .adapter import ChatAdapter
from .dto.settings import ChatModelSettings
from .errors_parts.provider_error import ChatProviderError, ConfigurationError
from .logging import LogContext, get_logger, log_event


class AdapterState(str, Enum):
    UNLOADED = "unloaded"
    ACTIVE = "active"


# Map adapter names to import paths and class names.
_ADAPTERS: Dict[str, Dict[str, str]] = {
    "openai": {"module": "chat_providers.openai.client", "class": "OpenAIAdapter"},
    "anthropic": {"module": "chat_providers.anthropic.client", "class": "AnthropicAdapter"},
    "gemini": {"module": "chat_providers.gemini.client", "class": "GeminiAdapter"},
    "cohere": {"module": "chat_providers.cohere.client", "class": "CohereAdapter"},
    "azure": {"module": "chat_providers.azure.client", "class": "AzureOpenAIAdapter"},
    "openrouter": {"module": "chat_providers.openrouter.client", "class": "OpenRouterAdapter"},
    "ollama": {"module": "chat_providers.ollama.client", "class": "OllamaAdapter"},
    "lm_studio": {"module": "chat_providers.lm_studio.client", "class": "LMStudioAdapter"},
    "groq": {"module": "chat_providers.groq.client", "class": "GroqAdapter"},
    "xai": {"module": "chat_providers.xai.client", "class": "XAIAdapter"},
    "custom": {"module": "chat_providers.custom.client", "class": "CustomAdapter"},
}

# Alternate spellings accepted in settings.
_ALIASES: Dict[str, str] = {"open_router": "openrouter", "google": "gemini", "lmstudio": "lm_studio"}


def adapter_names() -> List[str]:
    return sorted(_ADAPTERS)


def canonical_name(name: str) -> str:
    key = (name or "").strip().lower()
    return _ALIASES.get(key, key)


def load_adapter_class(name: str) -> Type[ChatAdapter]:
    """Import and return the adapter class registered under ``name``."""
    key = canonical_name(name)
    spec = _ADAPTERS.get(key)
    if not spec:
        raise ConfigurationError(f"unknown adapter {name!r}; known: {', '.join(adapter_names())}")
    module_path, class_name = spec["module"], spec["class"]
    try:
        mod = import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(f"failed to import {module_path!r} for adapter {name!r}: {exc}") from exc
    try:
        return getattr(mod, class_name)
    except AttributeError as exc:
        raise ConfigurationError(f"adapter class {class_name!r} not found in {module_path!r}") from exc


class AdapterRegistry:
    """Lazily constructs adapters from settings and tracks their lifecycle.

    Thread-safe: construction, reload, unload and switch are serialized by
    one lock, and ``get`` returns an immutable adapter reference.
    """

    def __init__(self, settings: Union[ChatModelSettings, Mapping[str, Any], None] = None) -> None:
        self._lock = threading.RLock()
        self._settings = self._coerce(settings)
        self._instances: Dict[str, ChatAdapter] = {}
        self._active_name = canonical_name(self._settings.adapter)
        self._logger = get_logger("chat_providers.registry")

    @staticmethod
    def _coerce(settings: Union[ChatModelSettings, Mapping[str, Any], None]) -> ChatModelSettings:
        if settings is None:
            from ..config import load_settings

            return load_settings()
        if isinstance(settings, ChatModelSettings):
            return settings
        return ChatModelSettings.from_mapping(settings)

    # ----- inspection -----------------------------------------------------
    @property
    def settings(self) -> ChatModelSettings:
        return self._settings

    @property
    def active_name(self) -> str:
        return self._active_name

    def state(self, name: str) -> AdapterState:
        return AdapterState.ACTIVE if canonical_name(name) in self._instances else AdapterState.UNLOADED

    def is_configured(self, name: str) -> bool:
        key = canonical_name(name)
        return key in _ADAPTERS and self._settings.has_section(key)

    # ----- lifecycle ------------------------------------------------------
    def get(self, name: Optional[str] = None) -> ChatAdapter:
        """Return the adapter for ``name`` (default: the active one), constructing it if needed."""
        key = canonical_name(name or self._active_name)
        with self._lock:
            instance = self._instances.get(key)
            if instance is not None:
                return instance
            klass = load_adapter_class(key)
            params = self._settings.section(key)
            if params is None:
                raise ConfigurationError(f"adapter {key!r} is not configured", provider=key)
            try:
                instance = klass(params)
            except ChatProviderError:
                raise
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"failed to construct adapter {key!r}: {exc}", provider=key) from exc
            self._instances[key] = instance
        log_event(self._logger, "adapter.load", LogContext(provider=key, model=instance.model))
        return instance

    def active(self) -> ChatAdapter:
        return self.get(self._active_name)

    def switch(self, name: str) -> ChatAdapter:
        """Make ``name`` the active adapter for subsequent requests."""
        key = canonical_name(name)
        with self._lock:
            if key not in _ADAPTERS:
                raise ConfigurationError(f"unknown adapter {name!r}")
            if not self._settings.has_section(key):
                raise ConfigurationError(f"adapter {key!r} is not configured", provider=key)
            previous, self._active_name = self._active_name, key
        log_event(self._logger, "registry.switch", LogContext(provider=key), previous=previous)
        return self.get(key)

    def unload(self, name: Optional[str] = None) -> bool:
        """Drop the instance for ``name``; returns False when it was not loaded."""
        key = canonical_name(name or self._active_name)
        with self._lock:
            dropped = self._instances.pop(key, None)
        if dropped is None:
            return False
        log_event(self._logger, "adapter.unload", LogContext(provider=key))
        return True

    def reload(self, settings: Union[ChatModelSettings, Mapping[str, Any], None] = None) -> None:
        """Swap in new settings and drop every constructed instance."""
        new_settings = self._coerce(settings)
        with self._lock:
            dropped = sorted(self._instances)
            self._settings = new_settings
            self._instances = {}
            self._active_name = canonical_name(new_settings.adapter)
        log_event(
            self._logger,
            "registry.reload",
            LogContext(provider=self._active_name),
            unloaded=dropped,
        )


__all__ = ["AdapterRegistry", "AdapterState", "adapter_names", "canonical_name", "load_adapter_class"]
