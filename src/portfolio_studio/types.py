"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RetrievalStep(str, Enum):
    """Named pipeline milestones reported back to the studio UI."""

    VALIDATING_QUERY = "VALIDATING_QUERY"
    LOADING_KB = "LOADING_KB"
    SCORING_DOCUMENTS = "SCORING_DOCUMENTS"
    BUILDING_SNIPPETS = "BUILDING_SNIPPETS"
    GENERATING_ANSWER = "GENERATING_ANSWER"
    DONE = "DONE"


@dataclass(frozen=True, slots=True)
class KnowledgeBaseDocument:
    """A markdown document read from the knowledge base."""

    id: str
    title: str
    relative_path: str
    content: str


@dataclass(frozen=True, slots=True)
class RetrievalMatch:
    """A scored document with its context snippet."""

    doc_id: str
    title: str
    relative_path: str
    score: int
    snippet: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "docId": self.doc_id,
            "title": self.title,
            "relativePath": self.relative_path,
            "score": self.score,
            "snippet": self.snippet,
        }


@dataclass(slots=True)
class RetrievalResult:
    """Ranked matches plus the trace of stages that produced them."""

    steps: list[RetrievalStep]
    query: str
    results: list[RetrievalMatch] = field(default_factory=list)


@dataclass(slots=True)
class AnswerResult:
    """Retrieval output extended with the generated answer."""

    steps: list[RetrievalStep]
    query: str
    results: list[RetrievalMatch]
    answer: str
