"""chat_providers package

One canonical chat representation, many LLM vendors.

Purpose:
    Hold a conversation as a :class:`Thread` of role-tagged messages and send
    it to any configured vendor (OpenAI, Anthropic, Gemini, Cohere, Azure,
    OpenRouter, Ollama, LM Studio, Groq, xAI, or a custom OpenAI-compatible
    endpoint) without the caller knowing which one is active.

Public API (re-exported):
    - Version: ``__version__``
    - Model: :class:`Thread`, :class:`Message`, :class:`GenerationConfig`, ...
    - Adapters: :func:`create` builds one adapter by name
    - Dispatch: :func:`connect` builds a registry + dispatcher from settings

Example::

    from chat_providers import Thread, connect

    dispatcher = connect({"adapter": "gemini", "gemini": {"model_key": "gemini-1.5-pro", "api_key": "..."}})
    thread = Thread(key="t1")
    thread.add_message("user", "Hello")
    for delta in dispatcher.send(thread):
        print(delta.text, end="")
"""

from typing import Any, Mapping, Optional, Union

from .base import *  # noqa: F401,F403
from .base import __all__ as _base_all
from .base.adapter import ChatAdapter
from .base.dispatcher import InFlightPolicy, RequestDispatcher
from .base.dto.adapter_params import AdapterParams
from .base.dto.settings import ChatModelSettings
from .base.http.client import Transport
from .base.registry import AdapterRegistry, load_adapter_class

__version__ = "0.1.0"


def create(adapter_name: str, *, params: Optional[AdapterParams] = None, **kwargs: Any) -> ChatAdapter:
    """Construct one adapter directly, bypassing the registry.

    Parameters
    ----------
    adapter_name:
        Registered adapter name (for example, ``"gemini"``).
    params:
        Optional :class:`AdapterParams`; ``kwargs`` override its fields.

    Raises
    ------
    ConfigurationError
        Unknown adapter name or invalid settings.
    """
    klass = load_adapter_class(adapter_name)
    return klass(params, **kwargs)


def connect(
    settings: Union[ChatModelSettings, Mapping[str, Any], None] = None,
    *,
    transport: Optional[Transport] = None,
    policy: InFlightPolicy = "abort",
) -> RequestDispatcher:
    """Build a dispatcher over a registry created from ``settings``.

    ``None`` loads settings from defaults, the config file and the environment.
    """
    return RequestDispatcher(AdapterRegistry(settings), transport, policy=policy)


__all__ = ["__version__", "create", "connect", *_base_all]
