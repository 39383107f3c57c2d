"""Groq adapter package."""

from .client import GroqAdapter

__all__ = ["GroqAdapter"]
