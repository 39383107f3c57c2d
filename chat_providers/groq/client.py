"""GroqAdapter: Groq's OpenAI-compatible endpoint (single choice only)."""

from __future__ import annotations

from ..base.capabilities import Capability
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import GROQ_DEFAULT_BASE_URL, GROQ_DEFAULT_MODEL


class GroqAdapter(OpenAIStyleAdapter):
    name = "groq"
    default_model = GROQ_DEFAULT_MODEL
    default_base_url = GROQ_DEFAULT_BASE_URL
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.IMAGES, Capability.STREAMING})
    SUPPORTS_N = False


__all__ = ["GroqAdapter"]
