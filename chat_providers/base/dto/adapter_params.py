"""Validated per-adapter configuration.

Purpose
-------
Carry the fields every adapter needs (model key, credentials, endpoint,
static headers) plus vendor-specific fields. Unknown keys are kept as model
extras so a vendor section such as ``{"deployment": ..., "api_version": ...}``
reaches its adapter unchanged.

External dependencies
---------------------
- Pydantic v2 ``BaseModel``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdapterParams(BaseModel):
    """Configuration section for one adapter name.

    Attributes
    ----------
    model_key:
        Vendor model identifier sent with each request (e.g. ``"gpt-4o"``).
    api_key:
        Credential sent as a header or query parameter; ``None`` for local
        servers that need none.
    base_url:
        Override for the vendor API root.
    headers:
        Extra static headers merged over the adapter's own.
    timeout_seconds:
        Advisory per-adapter timeout; the transport uses the central timeout
        configuration.
    extra:
        Explicit bag for vendor fields; merged with undeclared keys by
        :meth:`option`.
    """

    model_config = ConfigDict(extra="allow", frozen=True, protected_namespaces=())

    model_key: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    extra: Dict[str, Any] = Field(default_factory=dict)

    def option(self, key: str, default: Any = None) -> Any:
        """Return a vendor-specific field from ``extra`` or the undeclared keys."""
        if key in self.extra:
            return self.extra[key]
        return (self.model_extra or {}).get(key, default)


__all__ = ["AdapterParams"]
