"""Request and response models shared by LLM providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from portfolio_studio.config import LlmProviderId


class LlmMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class GenerateParams(BaseModel):
    """Provider-neutral generation request."""

    messages: list[LlmMessage] = Field(default_factory=list)
    system: str | None = None
    temperature: float | None = None
    max_tokens: int | None = Field(default=None, ge=1)


@dataclass(frozen=True, slots=True)
class GenerateResult:
    text: str


@dataclass(frozen=True, slots=True)
class LlmRunResult:
    """Generated text plus the provider and model that produced it."""

    text: str
    provider: LlmProviderId
    model: str
