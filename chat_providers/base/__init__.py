"""
Chat providers base package.

Exports the canonical model, the adapter contract, the registry and the
dispatcher:
- Models: messages, turns, threads, generation config, tools, deltas
- Adapter contract: ``ChatAdapter`` and ``Capability``
- Registry: lazy construction of adapters by name
- Dispatcher: request lifecycle, streaming and abort
"""

from .adapter import ChatAdapter
from .cancellation import CancellationToken, CancelledError
from .capabilities import Capability, required_capabilities
from .dispatcher import RequestDispatcher, RequestStatus, ResponseHandle
from .dto import AdapterParams, ChatModelSettings, thread_from_chat_request
from .errors import (
    ChatProviderError,
    ConfigurationError,
    DecodeError,
    RequestInFlightError,
    TransportError,
    UnsupportedCapabilityError,
    ValidationError,
    VendorError,
    VendorErrorKind,
)
from .http import HttpxTransport, Transport, TransportResponse, TransportStream
from .models import (
    CanonicalDelta,
    ChoiceDelta,
    GenerationConfig,
    ImagePart,
    Message,
    Part,
    Role,
    TextPart,
    Thread,
    ToolCallDelta,
    ToolCallPart,
    ToolDeclaration,
    ToolMode,
    ToolResultPart,
    Turn,
    normalize_content,
)
from .registry import AdapterRegistry, AdapterState
from .streaming import StreamAssembler, StreamMetrics
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Role",
    "Part",
    "TextPart",
    "ImagePart",
    "ToolCallPart",
    "ToolResultPart",
    "normalize_content",
    "Message",
    "Turn",
    "Thread",
    "GenerationConfig",
    "ToolMode",
    "ToolDeclaration",
    "CanonicalDelta",
    "ChoiceDelta",
    "ToolCallDelta",
    # Contract
    "ChatAdapter",
    "Capability",
    "required_capabilities",
    # Registry / dispatch
    "AdapterRegistry",
    "AdapterState",
    "RequestDispatcher",
    "ResponseHandle",
    "RequestStatus",
    "StreamAssembler",
    "StreamMetrics",
    # Transport
    "Transport",
    "TransportResponse",
    "TransportStream",
    "HttpxTransport",
    "TimeoutConfig",
    "get_timeout_config",
    # DTOs
    "AdapterParams",
    "ChatModelSettings",
    "thread_from_chat_request",
    # Errors
    "ChatProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedCapabilityError",
    "TransportError",
    "VendorError",
    "VendorErrorKind",
    "DecodeError",
    "RequestInFlightError",
    # Cancellation
    "CancellationToken",
    "CancelledError",
]
