"""Top-level chat model settings: ``{adapter: <name>, <name>: {...}}``."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from ..errors_parts.provider_error import ConfigurationError
from .adapter_params import AdapterParams


class ChatModelSettings(BaseModel):
    """Validated settings naming the active adapter and per-adapter sections.

    Per-adapter sections are carried as model extras keyed by adapter name and
    exposed through :meth:`section` as :class:`AdapterParams`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    adapter: str

    @field_validator("adapter")
    @classmethod
    def _normalize_adapter(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("adapter name must be non-empty")
        return value

    @property
    def sections(self) -> Dict[str, Any]:
        return {k.lower(): v for k, v in (self.model_extra or {}).items()}

    def has_section(self, name: str) -> bool:
        return isinstance(self.sections.get(name.lower()), (Mapping, AdapterParams))

    def section(self, name: str) -> Optional[AdapterParams]:
        """Return the validated section for ``name`` or ``None`` when absent."""
        raw = self.sections.get(name.lower())
        if raw is None:
            return None
        if isinstance(raw, AdapterParams):
            return raw
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"settings for adapter {name!r} must be a mapping", provider=name)
        try:
            return AdapterParams.model_validate(dict(raw))
        except PydanticValidationError as exc:
            raise ConfigurationError(f"invalid settings for adapter {name!r}: {exc}", provider=name) from exc

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChatModelSettings":
        """Validate a raw mapping, raising :class:`ConfigurationError` on failure."""
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise ConfigurationError(f"invalid chat model settings: {exc}") from exc


__all__ = ["ChatModelSettings"]
