"""User-defined OpenAI-compatible adapter package."""

from .client import CustomAdapter

__all__ = ["CustomAdapter"]
