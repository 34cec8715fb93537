"""Request-level pipeline: validate, retrieve, answer."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

from portfolio_studio.agent.composer import AnswerComposer, Generator
from portfolio_studio.config import KnowledgeBaseConfig, StudioConfig
from portfolio_studio.knowledge_base.reader import KnowledgeBaseReader
from portfolio_studio.retrieval.retriever import DocumentSource, KeywordRetriever, validate_query
from portfolio_studio.types import AnswerResult, RetrievalResult

NO_RESULTS_ANSWER = "I could not find relevant documents for that question."


class StudioService:
    """Runs one query through retrieval and, when asked, answer generation.

    Every call is independent: the knowledge base is re-read, nothing is
    cached, and the LLM is only contacted when retrieval found something.
    """

    def __init__(
        self,
        *,
        source: DocumentSource,
        config: StudioConfig | None = None,
        composer: AnswerComposer | None = None,
    ) -> None:
        self.config = config or StudioConfig()
        self.retriever = KeywordRetriever(source, self.config)
        self.composer = composer or AnswerComposer()

    def validate(self, query: str) -> str | None:
        return validate_query(query, self.config)

    def retrieve(self, query: str) -> RetrievalResult:
        return self.retriever.retrieve(query)

    async def answer(self, query: str) -> AnswerResult:
        retrieval = await asyncio.to_thread(self.retrieve, query)
        if not retrieval.results:
            return AnswerResult(
                steps=retrieval.steps,
                query=retrieval.query,
                results=[],
                answer=NO_RESULTS_ANSWER,
            )
        return await self.composer.compose(retrieval)


def build_service(
    environ: Mapping[str, str] | None = None,
    *,
    config: StudioConfig | None = None,
    generate: Generator | None = None,
) -> StudioService:
    reader = KnowledgeBaseReader(KnowledgeBaseConfig.from_env(environ))
    return StudioService(source=reader, config=config, composer=AnswerComposer(generate))
