import pytest
from pydantic import ValidationError

from portfolio_studio.config import LlmProviderId, resolve_llm_config
from portfolio_studio.errors import ConfigurationError, UnsupportedProviderError


def test_defaults_to_claude_with_provider_defaults() -> None:
    config = resolve_llm_config({"ANTHROPIC_API_KEY": "sk-ant"})

    assert config.provider is LlmProviderId.CLAUDE
    assert config.api_key == "sk-ant"
    assert config.base_url == "https://api.anthropic.com/v1/messages"
    assert config.model == "claude-3-5-sonnet-20241022"
    assert config.temperature == 0.2
    assert config.max_tokens == 700
    assert config.timeout_ms == 20000
    assert config.timeout_seconds == 20.0


def test_openai_provider_uses_its_own_defaults_and_key() -> None:
    config = resolve_llm_config({"LLM_PROVIDER": "OpenAI", "OPENAI_API_KEY": "sk-oai"})

    assert config.provider is LlmProviderId.OPENAI
    assert config.api_key == "sk-oai"
    assert config.base_url == "https://api.openai.com/v1/chat/completions"
    assert config.model == "gpt-4o-mini"


def test_generic_key_and_overrides_take_precedence() -> None:
    config = resolve_llm_config(
        {
            "LLM_PROVIDER": "claude",
            "LLM_API_KEY": "generic",
            "ANTHROPIC_API_KEY": "specific",
            "LLM_BASE_URL": "http://proxy.local/v1/messages",
            "LLM_MODEL": "claude-test",
            "LLM_TEMPERATURE": "0.7",
            "LLM_MAX_TOKENS": "256",
            "LLM_TIMEOUT_MS": "1500",
        }
    )

    assert config.api_key == "generic"
    assert config.base_url == "http://proxy.local/v1/messages"
    assert config.model == "claude-test"
    assert config.temperature == 0.7
    assert config.max_tokens == 256
    assert config.timeout_seconds == 1.5


def test_unparseable_numbers_fall_back_to_defaults() -> None:
    config = resolve_llm_config(
        {
            "LLM_API_KEY": "key",
            "LLM_TEMPERATURE": "warm",
            "LLM_MAX_TOKENS": "",
            "LLM_TIMEOUT_MS": "inf",
        }
    )

    assert config.temperature == 0.2
    assert config.max_tokens == 700
    assert config.timeout_ms == 20000


def test_non_positive_limits_fall_back_to_defaults() -> None:
    for raw in ("0", "-5", "0.5"):
        config = resolve_llm_config({"LLM_API_KEY": "key", "LLM_MAX_TOKENS": raw})

        assert config.max_tokens == 700

    for raw in ("0", "-5", "-0.1"):
        config = resolve_llm_config({"LLM_API_KEY": "key", "LLM_TIMEOUT_MS": raw})

        assert config.timeout_ms == 20000
        assert config.timeout_seconds == 20.0


def test_missing_api_key_fails_resolution() -> None:
    with pytest.raises(ConfigurationError, match="Missing API key for openai"):
        resolve_llm_config({"LLM_PROVIDER": "openai", "ANTHROPIC_API_KEY": "wrong-provider"})


def test_unsupported_provider_fails_fast() -> None:
    with pytest.raises(UnsupportedProviderError, match="Unsupported LLM provider: gemini"):
        resolve_llm_config({"LLM_PROVIDER": "gemini", "LLM_API_KEY": "key"})


def test_resolved_config_is_immutable() -> None:
    config = resolve_llm_config({"LLM_API_KEY": "key"})

    with pytest.raises(ValidationError):
        config.model = "other"  # type: ignore[misc]
