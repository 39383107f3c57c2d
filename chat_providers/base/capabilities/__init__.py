"""Capability model public surface."""

from .core import Capability, STRICT_CAPABILITIES, ensure_supported, required_capabilities

__all__ = ["Capability", "STRICT_CAPABILITIES", "ensure_supported", "required_capabilities"]
