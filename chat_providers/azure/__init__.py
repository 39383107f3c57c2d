"""Azure OpenAI adapter package."""

from .client import AzureOpenAIAdapter

__all__ = ["AzureOpenAIAdapter"]
