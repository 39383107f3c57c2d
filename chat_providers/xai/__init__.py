"""xAI adapter package."""

from .client import XAIAdapter

__all__ = ["XAIAdapter"]
