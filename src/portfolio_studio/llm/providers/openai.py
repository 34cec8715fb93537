"""OpenAI Chat Completions backend."""

from __future__ import annotations

from typing import Any

import httpx

from portfolio_studio.config import LlmConfig
from portfolio_studio.llm.http import post_json
from portfolio_studio.llm.types import GenerateParams, GenerateResult


async def generate_openai(
    params: GenerateParams,
    config: LlmConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> GenerateResult:
    messages = [{"role": m.role, "content": m.content} for m in params.messages]
    if params.system:
        messages.insert(0, {"role": "system", "content": params.system})

    payload: dict[str, Any] = {
        "model": config.model,
        "messages": messages,
        "max_tokens": params.max_tokens if params.max_tokens is not None else config.max_tokens,
        "temperature": params.temperature if params.temperature is not None else config.temperature,
    }
    data = await post_json(
        config=config,
        label="OpenAI",
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        },
        payload=payload,
        client=client,
    )
    return GenerateResult(text=_extract_text(data))


def _extract_text(data: dict[str, Any]) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""
