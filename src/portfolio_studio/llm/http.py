"""Single-shot JSON POST used by every provider backend."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from portfolio_studio.config import LlmConfig
from portfolio_studio.errors import ProviderRequestError, ProviderTimeoutError


async def post_json(
    *,
    config: LlmConfig,
    label: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """POST `payload` to the configured endpoint and return the decoded body.

    The whole round-trip, body included, runs under a `config.timeout_ms`
    deadline; when it expires the request is cancelled and
    `ProviderTimeoutError` is raised. Nothing is retried. A non-2xx status
    raises `ProviderRequestError` with the provider's own error message when
    the body carries one.
    """

    try:
        return await asyncio.wait_for(
            _send(config=config, label=label, headers=headers, payload=payload, client=client),
            timeout=config.timeout_seconds,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise ProviderTimeoutError(
            f"{label} request timed out after {config.timeout_ms:g} ms.",
            provider=config.provider.value,
        ) from exc


async def _send(
    *,
    config: LlmConfig,
    label: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    client: httpx.AsyncClient | None,
) -> dict[str, Any]:
    timeout = httpx.Timeout(config.timeout_seconds)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.post(config.base_url, headers=headers, json=payload)
        else:
            response = await client.post(
                config.base_url, headers=headers, json=payload, timeout=timeout
            )
    except httpx.TimeoutException:
        raise
    except httpx.HTTPError as exc:
        raise ProviderRequestError(
            f"{label} request failed: {exc}",
            provider=config.provider.value,
        ) from exc

    data = _decode_body(response)
    if not response.is_success:
        raise ProviderRequestError(
            _error_message(data) or f"{label} request failed ({response.status_code}).",
            provider=config.provider.value,
            status_code=response.status_code,
        )
    return data


def _decode_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(data: dict[str, Any]) -> str | None:
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None
