"""Gemini adapter package."""

from .client import GeminiAdapter
from .helpers import FunctionCallingMode

__all__ = ["GeminiAdapter", "FunctionCallingMode"]
