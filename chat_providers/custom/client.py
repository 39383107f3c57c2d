"""CustomAdapter: user-defined OpenAI-compatible endpoint.

Everything vendor-specific comes from settings::

    custom:
      base_url: http://10.0.0.5:8080/v1      # required
      model_key: my-model
      chat_path: /chat/completions          # optional
      api_key_header: Authorization         # optional; "Bearer " prefix only for Authorization
      capabilities: [streaming, tools]      # optional; default streaming only
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from ..base.capabilities import Capability
from ..base.dto.adapter_params import AdapterParams
from ..base.errors_parts.provider_error import ConfigurationError
from ..base.openai_style_parts import OpenAIStyleAdapter


def _parse_capabilities(raw: Any) -> FrozenSet[Capability]:
    if raw is None:
        return frozenset({Capability.STREAMING})
    try:
        return frozenset(Capability(str(v).lower()) for v in raw)
    except ValueError as exc:
        raise ConfigurationError(f"unknown capability in custom settings: {exc}", provider="custom") from exc


class CustomAdapter(OpenAIStyleAdapter):
    name = "custom"

    def __init__(self, params: Optional[AdapterParams] = None, **overrides: Any) -> None:
        super().__init__(params, **overrides)
        if not self.base_url:
            raise ConfigurationError("custom adapter requires base_url", provider=self.name)
        self._capabilities = _parse_capabilities(self.params.option("capabilities"))
        path = str(self.params.option("chat_path", self.CHAT_PATH))
        self._chat_path = path if path.startswith("/") else f"/{path}"
        self._key_header = str(self.params.option("api_key_header", "Authorization"))

    @property
    def SUPPORTS_N(self) -> bool:  # type: ignore[override]
        return Capability.MULTIPLE_CHOICES in self._capabilities

    def capabilities(self) -> FrozenSet[Capability]:
        return self._capabilities

    def endpoint(self, stream: bool = False) -> str:
        return f"{self.base_url}{self._chat_path}"

    def auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        if self._key_header.lower() == "authorization":
            return {"Authorization": f"Bearer {self.api_key}"}
        return {self._key_header: self.api_key}


__all__ = ["CustomAdapter"]
