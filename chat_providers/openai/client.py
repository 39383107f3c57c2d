"""OpenAIAdapter: OpenAI Chat Completions."""

from __future__ import annotations

from typing import Dict

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_MODEL


class OpenAIAdapter(OpenAIStyleAdapter):
    """OpenAI (``/v1/chat/completions``) with bearer-token auth.

    An optional ``organization`` setting is sent as ``OpenAI-Organization``.
    """

    name = "openai"
    default_model = OPENAI_DEFAULT_MODEL
    default_base_url = OPENAI_DEFAULT_BASE_URL

    def auth_headers(self) -> Dict[str, str]:
        headers = super().auth_headers()
        org = self.params.option("organization")
        if org:
            headers["OpenAI-Organization"] = str(org)
        return headers


__all__ = ["OpenAIAdapter"]
