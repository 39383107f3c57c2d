"""Adapter contract: canonical model to and from one vendor's wire format.

Every vendor implements :class:`ChatAdapter`. Translation methods are pure:
they never mutate their inputs and keep no per-conversation state, so one
instance is shared by all threads using the same configuration. All I/O is
left to the dispatcher and its transport.

Subclasses provide:
    * ``name`` / ``default_model`` / ``default_base_url`` class attributes,
    * ``CAPABILITIES``: the advertised :class:`Capability` set,
    * :meth:`to_request`, :meth:`from_response`, :meth:`to_stream_chunk`,
    * :meth:`endpoint` and, when the vendor authenticates differently from
      ``Authorization: Bearer``, :meth:`auth_headers`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence

from .capabilities import Capability, ensure_supported, required_capabilities
from .dto.adapter_params import AdapterParams
from .errors_parts.classification import vendor_error_from_body
from .errors_parts.provider_error import VendorError
from .models_parts.canonical_delta import CanonicalDelta
from .models_parts.generation_config import GenerationConfig
from .models_parts.message import Message
from .models_parts.thread import Thread
from .models_parts.tool_declaration import ToolDeclaration


class ChatAdapter(ABC):
    """Strategy interface implemented once per vendor."""

    name: str = ""
    default_model: Optional[str] = None
    default_base_url: Optional[str] = None
    CAPABILITIES: FrozenSet[Capability] = frozenset()

    def __init__(self, params: Optional[AdapterParams] = None, **overrides: Any) -> None:
        base = params.model_dump() if params is not None else {}
        base.update({k: v for k, v in overrides.items() if v is not None})
        self._params = AdapterParams.model_validate(base)

    # ----- configuration --------------------------------------------------
    @property
    def params(self) -> AdapterParams:
        return self._params

    @property
    def model(self) -> Optional[str]:
        return self._params.model_key or self.default_model

    @property
    def api_key(self) -> Optional[str]:
        return self._params.api_key

    @property
    def base_url(self) -> str:
        return (self._params.base_url or self.default_base_url or "").rstrip("/")

    # ----- capabilities ---------------------------------------------------
    def capabilities(self) -> FrozenSet[Capability]:
        return self.CAPABILITIES

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities()

    def check_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration],
        *,
        stream: bool = False,
    ) -> bool:
        """Validate capabilities for a request and return the effective ``stream`` flag.

        Raises:
            UnsupportedCapabilityError: when tools, images or multiple choices
                are needed but not advertised.
        """
        needed = required_capabilities(messages, config, tools, stream=stream)
        ensure_supported(needed, self.capabilities(), provider=self.name)
        return stream and self.supports(Capability.STREAMING)

    # ----- translation ----------------------------------------------------
    @abstractmethod
    def to_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        """Build the vendor request payload."""

    @abstractmethod
    def from_response(self, response: Any) -> CanonicalDelta:
        """Decode a complete vendor response (one choice per candidate)."""

    @abstractmethod
    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        """Decode one stream frame; ``None`` for frames without content."""

    def build_request(self, thread: Thread, *, stream: bool = False) -> Dict[str, Any]:
        """Shortcut translating a thread's selected messages, config and tools."""
        return self.to_request(thread.messages(), thread.config, thread.tools, stream=stream)

    # ----- transport details ----------------------------------------------
    @abstractmethod
    def endpoint(self, stream: bool = False) -> str:
        """Absolute URL for a (streaming) chat request."""

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    def headers(self) -> Dict[str, str]:
        out = {"Content-Type": "application/json"}
        out.update(self.auth_headers())
        out.update(self._params.headers)
        return out

    def parse_error(self, status: Optional[int], body: Any) -> VendorError:
        """Decode an error response body into a :class:`VendorError`."""
        return vendor_error_from_body(status, body, provider=self.name)

    def is_error_body(self, body: Any) -> bool:
        return isinstance(body, Mapping) and "error" in body and bool(body["error"])

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"{type(self).__name__}(model={self.model!r})"


__all__ = ["ChatAdapter"]
