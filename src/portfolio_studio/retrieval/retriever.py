"""Lexical retriever over the markdown knowledge base."""

from __future__ import annotations

import re
from typing import Protocol

from portfolio_studio.config import StudioConfig
from portfolio_studio.obs.tracing import StageTrace
from portfolio_studio.types import (
    KnowledgeBaseDocument,
    RetrievalMatch,
    RetrievalResult,
    RetrievalStep,
)

_WHITESPACE = re.compile(r"\s+")
_ELLIPSIS = "…"


class DocumentSource(Protocol):
    """Anything that can list the knowledge base documents."""

    def list_documents(self) -> list[KnowledgeBaseDocument]:
        """Return every document, freshly read."""


def validate_query(query: str, config: StudioConfig | None = None) -> str | None:
    """Return a user-facing error message when the query is too short."""

    config = config or StudioConfig()
    if len(query.strip()) < config.min_query_length:
        return f"Query must be at least {config.min_query_length} characters."
    return None


class KeywordRetriever:
    """Term-frequency retriever for a small, fixed document set.

    Scoring:
    - The query is lower-cased, whitespace-collapsed and split into tokens.
    - Each document's haystack is its title, relative path and content joined
      by newlines, normalized the same way.
    - A document scores the number of non-overlapping occurrences of every
      token in its haystack, summed over tokens. Matching is plain substring
      search, so `"go"` also hits `"google"`; short abbreviations such as
      `"aws"` rely on that.

    Documents scoring zero are dropped, the rest are ranked by score with a
    stable sort and cut to `max_results`. Each survivor gets a snippet of
    `snippet_radius_chars` on either side of its earliest token hit.
    """

    def __init__(self, source: DocumentSource, config: StudioConfig | None = None) -> None:
        self.source = source
        self.config = config or StudioConfig()

    def retrieve(self, query: str) -> RetrievalResult:
        trimmed = query.strip()
        trace = StageTrace([RetrievalStep.VALIDATING_QUERY, RetrievalStep.LOADING_KB])

        documents = self.source.list_documents()

        trace.record(RetrievalStep.SCORING_DOCUMENTS)
        tokens = tokenize(trimmed)
        scored = [
            (doc, score_document(f"{doc.title}\n{doc.relative_path}\n{doc.content}", tokens))
            for doc in documents
        ]
        ranked = sorted(
            (item for item in scored if item[1] > 0),
            key=lambda item: item[1],
            reverse=True,
        )[: self.config.max_results]

        trace.record(RetrievalStep.BUILDING_SNIPPETS)
        results = [
            RetrievalMatch(
                doc_id=doc.id,
                title=doc.title,
                relative_path=doc.relative_path,
                score=score,
                snippet=build_snippet(doc.content, tokens, self.config.snippet_radius_chars),
            )
            for doc, score in ranked
        ]

        trace.record(RetrievalStep.DONE)
        return RetrievalResult(steps=trace.as_list(), query=trimmed, results=results)


def normalize_text(value: str) -> str:
    return collapse_whitespace(value).lower()


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def tokenize(query: str) -> list[str]:
    return [token for token in normalize_text(query).split(" ") if token]


def count_occurrences(haystack: str, token: str) -> int:
    """Count non-overlapping occurrences, so `"aa"` appears twice in `"aaaa"`."""

    if not token:
        return 0
    return haystack.count(token)


def score_document(text: str, tokens: list[str]) -> int:
    haystack = normalize_text(text)
    return sum(count_occurrences(haystack, token) for token in tokens)


def build_snippet(content: str, tokens: list[str], radius: int) -> str:
    """Cut a window of `radius` characters around the earliest token hit."""

    normalized = collapse_whitespace(content)
    lower = normalized.lower()

    hits = [index for index in (lower.find(token) for token in tokens if token) if index >= 0]
    if not hits:
        return normalized[: radius * 2]

    first_hit = min(hits)
    start = max(0, first_hit - radius)
    end = min(len(normalized), first_hit + radius)

    prefix = _ELLIPSIS if start > 0 else ""
    suffix = _ELLIPSIS if end < len(normalized) else ""
    return f"{prefix}{normalized[start:end]}{suffix}"
