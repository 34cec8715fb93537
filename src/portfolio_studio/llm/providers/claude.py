"""Anthropic Messages API backend."""

from __future__ import annotations

from typing import Any

import httpx

from portfolio_studio.config import LlmConfig
from portfolio_studio.llm.http import post_json
from portfolio_studio.llm.types import GenerateParams, GenerateResult, LlmMessage

ANTHROPIC_VERSION = "2023-06-01"


def split_system(
    messages: list[LlmMessage], explicit_system: str | None = None
) -> tuple[str, list[LlmMessage]]:
    """Fold system-role messages into the separate `system` field.

    Returns (system_prompt, remaining_messages). The explicit system prompt
    comes first; parts are joined by a blank line.
    """

    system_parts = [explicit_system] if explicit_system else []
    conversation: list[LlmMessage] = []
    for message in messages:
        if message.role == "system":
            if message.content:
                system_parts.append(message.content)
        else:
            conversation.append(message)
    return "\n\n".join(system_parts), conversation


async def generate_claude(
    params: GenerateParams,
    config: LlmConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> GenerateResult:
    system, messages = split_system(params.messages, params.system)
    payload: dict[str, Any] = {
        "model": config.model,
        "max_tokens": params.max_tokens if params.max_tokens is not None else config.max_tokens,
        "temperature": params.temperature if params.temperature is not None else config.temperature,
        "system": system,
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }
    data = await post_json(
        config=config,
        label="Claude",
        headers={
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        },
        payload=payload,
        client=client,
    )
    return GenerateResult(text=_extract_text(data))


def _extract_text(data: dict[str, Any]) -> str:
    blocks = data.get("content")
    if not isinstance(blocks, list):
        return ""
    parts: list[str] = []
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
            parts.append(str(block["text"]))
    return "".join(parts).strip()
