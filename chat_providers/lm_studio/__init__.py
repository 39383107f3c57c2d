"""LM Studio adapter package."""

from .client import LMStudioAdapter

__all__ = ["LMStudioAdapter"]
