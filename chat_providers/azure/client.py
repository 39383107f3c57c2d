"""AzureOpenAIAdapter: Azure OpenAI deployments.

The deployment is part of the URL, so the payload carries no ``model``
field. Settings:

    azure:
      base_url: https://my-resource.openai.azure.com
      deployment: gpt-4o-prod
      api_version: "2024-02-01"
      api_key: ...
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.dto.adapter_params import AdapterParams
from ..base.errors_parts.provider_error import ConfigurationError
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import AZURE_DEFAULT_API_VERSION


class AzureOpenAIAdapter(OpenAIStyleAdapter):
    """Azure OpenAI Service; authenticates with the ``api-key`` header."""

    name = "azure"
    INCLUDE_MODEL = False

    def __init__(self, params: Optional[AdapterParams] = None, **overrides: Any) -> None:
        super().__init__(params, **overrides)
        self._deployment = self.params.option("deployment") or self.params.model_key
        self._api_version = str(self.params.option("api_version", AZURE_DEFAULT_API_VERSION))
        if not self.base_url:
            raise ConfigurationError("azure requires base_url (resource endpoint)", provider=self.name)
        if not self._deployment:
            raise ConfigurationError("azure requires a deployment name", provider=self.name)

    @property
    def deployment(self) -> str:
        return self._deployment

    def endpoint(self, stream: bool = False) -> str:
        return (
            f"{self.base_url}/openai/deployments/{self._deployment}/chat/completions"
            f"?api-version={self._api_version}"
        )

    def auth_headers(self) -> Dict[str, str]:
        return {"api-key": self.api_key} if self.api_key else {}


__all__ = ["AzureOpenAIAdapter"]
