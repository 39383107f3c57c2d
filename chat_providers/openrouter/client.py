"""OpenRouterAdapter: OpenRouter's OpenAI-compatible gateway.

OpenRouter accepts ``top_k`` but not ``n`` (one choice per request), sends
``: OPENROUTER PROCESSING`` comment lines as keep-alives, and uses the
optional ``HTTP-Referer`` / ``X-Title`` headers for app attribution
(settings ``referer`` and ``title``).
"""

from __future__ import annotations

from typing import Dict

from ..base.capabilities import Capability
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL, OPENROUTER_DEFAULT_MODEL


class OpenRouterAdapter(OpenAIStyleAdapter):
    name = "openrouter"
    default_model = OPENROUTER_DEFAULT_MODEL
    default_base_url = OPENROUTER_DEFAULT_BASE_URL
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.IMAGES, Capability.STREAMING})
    SUPPORTS_N = False
    SUPPORTS_TOP_K = True

    def auth_headers(self) -> Dict[str, str]:
        headers = super().auth_headers()
        referer = self.params.option("referer")
        title = self.params.option("title")
        if referer:
            headers["HTTP-Referer"] = str(referer)
        if title:
            headers["X-Title"] = str(title)
        return headers


__all__ = ["OpenRouterAdapter"]
