"""Tests for layered adapter configuration.

Covers:
- Defaults per adapter
- Config file (YAML and JSON) overriding defaults
- Environment variables (canonical names and vendor aliases) overriding the file
- Placeholder API keys being ignored
- Explicit overrides winning over everything
- ``load_settings`` producing validated ``ChatModelSettings``
"""

from __future__ import annotations

import json

import pytest

from chat_providers.base.dto.settings import ChatModelSettings
from chat_providers.base.errors import ConfigurationError
from chat_providers.config import (
    CONFIG_FILE_ENV,
    clear_config_cache,
    get_adapter_config,
    load_config_file,
    load_settings,
)
from chat_providers.config.defaults import GEMINI_DEFAULT_MODEL, OPENAI_DEFAULT_BASE_URL
from chat_providers.config.env import env_var_candidates, is_placeholder

_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "OLLAMA_BASE_URL",
    "OLLAMA_HOST",
    "AZURE_API_KEY",
    "AZURE_OPENAI_API_KEY",
    CONFIG_FILE_ENV,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults_only():
    cfg = get_adapter_config("openai")
    assert cfg["base_url"] == OPENAI_DEFAULT_BASE_URL  # nosec B101 - test assertion
    assert "api_key" not in cfg  # nosec B101 - test assertion
    assert get_adapter_config("GEMINI")["model_key"] == GEMINI_DEFAULT_MODEL  # nosec B101


def test_yaml_file_then_env_then_overrides(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "chat.yaml"
    path.write_text(
        "adapter: gemini\n"
        "gemini:\n"
        "  model_key: gemini-from-file\n"
        "  safety_threshold: BLOCK_ONLY_HIGH\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    cfg = get_adapter_config("gemini")
    assert cfg["model_key"] == "gemini-from-file"  # nosec B101 - test assertion
    assert cfg["safety_threshold"] == "BLOCK_ONLY_HIGH"  # nosec B101 - test assertion

    monkeypatch.setenv("GEMINI_MODEL", "gemini-from-env")
    assert get_adapter_config("gemini")["model_key"] == "gemini-from-env"  # nosec B101

    cfg = get_adapter_config("gemini", {"model_key": "gemini-override", "api_key": None})
    assert cfg["model_key"] == "gemini-override"  # nosec B101 - test assertion


def test_json_file_is_supported(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "chat.json"
    path.write_text(json.dumps({"adapter": "ollama", "ollama": {"keep_alive": "5m"}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert load_config_file()["adapter"] == "ollama"  # nosec B101 - test assertion
    settings = load_settings()
    assert settings.adapter == "ollama"  # nosec B101 - test assertion
    assert settings.section("ollama").option("keep_alive") == "5m"  # nosec B101 - test assertion


def test_malformed_file_raises(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "broken.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ConfigurationError):
        load_config_file()
    bad = tmp_path / "bad.yaml"
    bad.write_text("gemini: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(bad))
    clear_config_cache()
    with pytest.raises(ConfigurationError):
        load_config_file()


def test_missing_file_yields_empty(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "nope.yaml"))
    assert load_config_file() == {}  # nosec B101 - test assertion


def test_env_aliases_and_placeholders(monkeypatch: pytest.MonkeyPatch):
    assert list(env_var_candidates("gemini", "api_key")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]  # nosec B101
    monkeypatch.setenv("GOOGLE_API_KEY", "g-real-key")  # pragma: allowlist secret - test-only fake key
    assert get_adapter_config("gemini")["api_key"] == "g-real-key"  # nosec B101 - test assertion

    monkeypatch.setenv("OPENAI_API_KEY", "changeme")  # pragma: allowlist secret - placeholder value
    assert "api_key" not in get_adapter_config("openai")  # nosec B101 - test assertion

    monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434")
    assert get_adapter_config("ollama")["base_url"] == "http://gpu-box:11434"  # nosec B101


@pytest.mark.parametrize(
    "value,expected",
    [(None, False), ("", True), ("changeme", True), ("YOUR_PLACEHOLDER", True), ("test_key", True), ("sk-live", False)],
)
def test_is_placeholder(value, expected):
    assert is_placeholder(value) is expected  # nosec B101 - test assertion


def test_load_settings_covers_known_and_custom_sections():
    settings = load_settings(
        {"custom": {"base_url": "http://10.0.0.5:8080/v1", "model_key": "m"}},
        adapter="custom",
    )
    assert isinstance(settings, ChatModelSettings)  # nosec B101 - test assertion
    assert settings.adapter == "custom"  # nosec B101 - test assertion
    for name in ("openai", "anthropic", "gemini", "cohere", "azure", "ollama", "custom"):
        assert settings.has_section(name)  # nosec B101 - test assertion
    assert settings.section("custom").base_url == "http://10.0.0.5:8080/v1"  # nosec B101
    assert settings.section("unknown") is None  # nosec B101 - test assertion


def test_settings_validation_errors():
    with pytest.raises(ConfigurationError):
        ChatModelSettings.from_mapping({"adapter": "  "})
    settings = ChatModelSettings.from_mapping({"adapter": "OpenAI", "openai": {"timeout_seconds": -1}})
    assert settings.adapter == "openai"  # nosec B101 - test assertion
    with pytest.raises(ConfigurationError):
        settings.section("openai")
