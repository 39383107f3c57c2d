"""chat_providers.config.env
=========================

Environment variable names per adapter and placeholder detection.

Conventions: ``<ADAPTER>_API_KEY``, ``<ADAPTER>_MODEL``, ``<ADAPTER>_BASE_URL``
with the adapter name upper-cased (``LM_STUDIO_BASE_URL``). Some vendors have
historic aliases, listed canonical first.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Config field -> env var suffix.
ENV_FIELD_MAP: Dict[str, str] = {
    "model_key": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
}

# Adapter -> extra accepted env var names per field (canonical name first).
ENV_ALIASES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "gemini": {"api_key": ("GEMINI_API_KEY", "GOOGLE_API_KEY")},
    "azure": {
        "api_key": ("AZURE_API_KEY", "AZURE_OPENAI_API_KEY"),
        "base_url": ("AZURE_BASE_URL", "AZURE_OPENAI_ENDPOINT"),
    },
    "cohere": {"api_key": ("COHERE_API_KEY", "CO_API_KEY")},
    "ollama": {"base_url": ("OLLAMA_BASE_URL", "OLLAMA_HOST")},
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True for placeholder or test values (``"changeme"``, ``"test_..."``)."""
    if val is None:
        return False
    v = str(val).strip().lower()
    return not v or "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def env_var_candidates(adapter: str, field: str) -> Iterable[str]:
    """Yield env var names for ``field`` of ``adapter`` in priority order."""
    name = (adapter or "").lower().strip()
    canonical = f"{name.upper()}_{ENV_FIELD_MAP[field]}"
    yield canonical
    for alias in ENV_ALIASES.get(name, {}).get(field, ()):
        if alias != canonical:
            yield alias


def env_overrides(adapter: str) -> Dict[str, str]:
    """Collect environment values for ``adapter``.

    Placeholder API keys are skipped so a sample ``.env`` never sends a fake
    credential.
    """
    out: Dict[str, str] = {}
    for field in ENV_FIELD_MAP:
        for var in env_var_candidates(adapter, field):
            value = os.getenv(var)
            if value is None or value.strip() == "":
                continue
            if field == "api_key" and is_placeholder(value):
                continue
            out[field] = value
            break
    return out


__all__ = ["ENV_FIELD_MAP", "ENV_ALIASES", "is_placeholder", "env_var_candidates", "env_overrides"]
