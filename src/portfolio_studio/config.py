"""Configuration models for the portfolio studio."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from math import isfinite
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from portfolio_studio.errors import ConfigurationError, UnsupportedProviderError

KB_DIR_ENV = "PORTFOLIO_KB_DIR"

ROOT_DOCUMENTS: tuple[str, ...] = (
    "about.md",
    "overview.md",
    "experience.md",
    "education.md",
    "skills.md",
)


class StudioConfig(BaseModel):
    """Configures query validation, ranking cut-off and snippet size."""

    model_config = ConfigDict(frozen=True)

    max_results: int = Field(default=5, ge=1)
    min_query_length: int = Field(default=3, ge=1)
    snippet_radius_chars: int = Field(default=180, ge=1)


class KnowledgeBaseConfig(BaseModel):
    """Locates the markdown knowledge base on disk."""

    model_config = ConfigDict(frozen=True)

    root_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "app_data" / "knowledge_base"
    )
    root_documents: tuple[str, ...] = ROOT_DOCUMENTS

    @property
    def projects_dir(self) -> Path:
        return self.root_dir / "projects"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "KnowledgeBaseConfig":
        env = os.environ if environ is None else environ
        root = env.get(KB_DIR_ENV)
        if root:
            return cls(root_dir=Path(root))
        return cls()


class LlmProviderId(str, Enum):
    CLAUDE = "claude"
    OPENAI = "openai"


_PROVIDER_DEFAULTS: dict[LlmProviderId, dict[str, str]] = {
    LlmProviderId.CLAUDE: {
        "base_url": "https://api.anthropic.com/v1/messages",
        "model": "claude-3-5-sonnet-20241022",
        "key_env": "ANTHROPIC_API_KEY",
    },
    LlmProviderId.OPENAI: {
        "base_url": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4o-mini",
        "key_env": "OPENAI_API_KEY",
    },
}


class LlmConfig(BaseModel):
    """Resolved settings for a single LLM generation call."""

    model_config = ConfigDict(frozen=True)

    provider: LlmProviderId
    api_key: str = Field(min_length=1, repr=False)
    base_url: str
    model: str
    temperature: float = 0.2
    max_tokens: int = Field(default=700, ge=1)
    timeout_ms: float = Field(default=20000.0, gt=0.0)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def resolve_llm_config(environ: Mapping[str, str] | None = None) -> LlmConfig:
    """Resolve LLM settings from environment variables.

    `LLM_PROVIDER` selects the backend (`claude` when unset). The API key is
    read from `LLM_API_KEY` or the provider-specific variable; resolution
    fails before any request is attempted when neither is set.
    """

    env = os.environ if environ is None else environ

    provider_raw = (env.get("LLM_PROVIDER") or "").strip().lower()
    if not provider_raw:
        provider = LlmProviderId.CLAUDE
    else:
        try:
            provider = LlmProviderId(provider_raw)
        except ValueError as exc:
            raise UnsupportedProviderError(provider_raw) from exc

    defaults = _PROVIDER_DEFAULTS[provider]
    api_key = env.get("LLM_API_KEY") or env.get(defaults["key_env"]) or ""
    if not api_key:
        raise ConfigurationError(
            f"Missing API key for {provider.value}. "
            "Set LLM_API_KEY or a provider-specific key."
        )

    return LlmConfig(
        provider=provider,
        api_key=api_key,
        base_url=env.get("LLM_BASE_URL") or defaults["base_url"],
        model=env.get("LLM_MODEL") or defaults["model"],
        temperature=_parse_number(env.get("LLM_TEMPERATURE"), 0.2),
        max_tokens=int(_parse_positive(env.get("LLM_MAX_TOKENS"), 700, minimum=1)),
        timeout_ms=_parse_positive(env.get("LLM_TIMEOUT_MS"), 20000.0),
    )


def _parse_number(value: str | None, fallback: float) -> float:
    if not value:
        return fallback
    try:
        parsed = float(value)
    except ValueError:
        return fallback
    return parsed if isfinite(parsed) else fallback


def _parse_positive(value: str | None, fallback: float, *, minimum: float = 0.0) -> float:
    parsed = _parse_number(value, fallback)
    return parsed if parsed > 0 and parsed >= minimum else fallback
