"""XAIAdapter: xAI (Grok) OpenAI-compatible endpoint."""

from __future__ import annotations

from ..base.capabilities import Capability
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import XAI_DEFAULT_BASE_URL, XAI_DEFAULT_MODEL


class XAIAdapter(OpenAIStyleAdapter):
    name = "xai"
    default_model = XAI_DEFAULT_MODEL
    default_base_url = XAI_DEFAULT_BASE_URL
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.IMAGES, Capability.STREAMING})
    SUPPORTS_N = False


__all__ = ["XAIAdapter"]
