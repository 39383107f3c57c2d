"""LMStudioAdapter: local LM Studio server (OpenAI-compatible, no API key).

Local models vary; the adapter advertises streaming and tools only, so
image content and ``n > 1`` are rejected before any request is made.
"""

from __future__ import annotations

from typing import Dict

from ..base.capabilities import Capability
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import LM_STUDIO_DEFAULT_BASE_URL


class LMStudioAdapter(OpenAIStyleAdapter):
    name = "lm_studio"
    default_base_url = LM_STUDIO_DEFAULT_BASE_URL
    default_model = "local-model"
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.STREAMING})
    SUPPORTS_N = False

    def auth_headers(self) -> Dict[str, str]:
        return {}


__all__ = ["LMStudioAdapter"]
