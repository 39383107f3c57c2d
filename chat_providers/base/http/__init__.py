"""HTTP transport public surface."""

from .client import (
    HttpxTransport,
    Transport,
    TransportResponse,
    TransportStream,
    close_all_clients,
    get_httpx_client,
)

__all__ = [
    "Transport",
    "TransportResponse",
    "TransportStream",
    "HttpxTransport",
    "get_httpx_client",
    "close_all_clients",
]
