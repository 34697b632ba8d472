import pytest

from wingman_core.providers import create_provider
from wingman_core.providers.gemini_client import GeminiClient
from wingman_core.providers.registry import GEMINI_CONFIG, get_provider_config, resolve_model


class DummySettings:
    gemini_api_key = "g-test-key-123"
    gemini_model = None
    default_model = "wingman-chat"
    http_timeout = 1.0
    gemini_base_url = "https://generativelanguage.googleapis.com/v1beta"


def test_create_provider_default():
    provider = create_provider(DummySettings())
    assert isinstance(provider, GeminiClient)
    assert provider.model == "gemini-2.0-flash"


def test_create_provider_unknown():
    with pytest.raises(KeyError):
        create_provider(DummySettings(), "kimi")


def test_registry_lookup_case_insensitive():
    assert get_provider_config("GEMINI") is GEMINI_CONFIG


def test_resolve_model_override():
    assert resolve_model(GEMINI_CONFIG, "wingman-chat").provider_model == "gemini-2.0-flash"
    assert resolve_model(GEMINI_CONFIG, "wingman-chat", "gemini-x").provider_model == "gemini-x"
    with pytest.raises(KeyError):
        resolve_model(GEMINI_CONFIG, "ide-chat")
