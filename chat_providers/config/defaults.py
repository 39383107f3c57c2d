"""chat_providers.config.defaults
==============================

Built-in defaults per adapter name: model keys and API roots. Plain
constants only; no imports from other package modules.
"""

from __future__ import annotations

# Adapter selected when neither the config file nor overrides name one.
DEFAULT_ADAPTER = "openai"

OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-latest"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"

GEMINI_DEFAULT_MODEL = "gemini-1.5-pro"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

COHERE_DEFAULT_MODEL = "command-r-plus"
COHERE_DEFAULT_BASE_URL = "https://api.cohere.ai/v1"

AZURE_DEFAULT_API_VERSION = "2024-02-01"

OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

GROQ_DEFAULT_MODEL = "llama-3.1-70b-versatile"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

XAI_DEFAULT_MODEL = "grok-2-latest"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"

OLLAMA_DEFAULT_MODEL = "llama3.1"
OLLAMA_DEFAULT_HOST = "http://localhost:11434"

LM_STUDIO_DEFAULT_BASE_URL = "http://localhost:1234/v1"


__all__ = [name for name in dir() if name.isupper()]
