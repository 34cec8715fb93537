"""Provider dispatch for text generation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

import httpx

from portfolio_studio.config import LlmConfig, LlmProviderId, resolve_llm_config
from portfolio_studio.llm.providers.claude import generate_claude
from portfolio_studio.llm.providers.openai import generate_openai
from portfolio_studio.llm.types import GenerateParams, GenerateResult, LlmRunResult
from portfolio_studio.obs.logging import get_logger
from portfolio_studio.obs.tracing import Timer

logger = get_logger(__name__)


class ProviderFn(Protocol):
    async def __call__(
        self,
        params: GenerateParams,
        config: LlmConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> GenerateResult: ...


PROVIDERS: dict[LlmProviderId, ProviderFn] = {
    LlmProviderId.CLAUDE: generate_claude,
    LlmProviderId.OPENAI: generate_openai,
}


async def generate_text(
    params: GenerateParams,
    *,
    config: LlmConfig | None = None,
    environ: Mapping[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> LlmRunResult:
    """Generate text with the configured provider.

    Configuration is resolved from the environment on every call unless an
    explicit `config` is passed. Configuration errors, unknown providers
    included, surface before any request is made.
    """

    config = config or resolve_llm_config(environ)
    provider = PROVIDERS[config.provider]

    with Timer() as timer:
        try:
            result = await provider(params, config, client=client)
        except Exception:
            logger.warning(
                "LLM generation failed provider=%s model=%s",
                config.provider.value,
                config.model,
            )
            raise

    logger.info(
        "LLM generation completed provider=%s model=%s latency_ms=%.1f chars=%d",
        config.provider.value,
        config.model,
        timer.elapsed_ms,
        len(result.text),
    )
    return LlmRunResult(text=result.text, provider=config.provider, model=config.model)
