"""Grounded answer composition on top of retrieval matches."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from langchain_core.prompts import ChatPromptTemplate

from portfolio_studio.llm.client import generate_text
from portfolio_studio.llm.types import GenerateParams, LlmMessage, LlmRunResult
from portfolio_studio.obs.logging import get_logger
from portfolio_studio.obs.tracing import StageTrace
from portfolio_studio.types import AnswerResult, RetrievalMatch, RetrievalResult, RetrievalStep

logger = get_logger(__name__)

_SYSTEM_PROMPT = """
You are the assistant on a personal portfolio website. Recruiters ask you about
the site owner's background, experience, education, skills and projects.

Rules:
1) Answer using only the provided context.
2) If the answer is not in the context, say you do not know.
3) Never invent employers, dates, technologies or outcomes.
4) Refer to the source title when it helps the reader verify a claim.

Tone: concise, direct and professional.
""".strip()

_USER_TEMPLATE = "Question: {question}\n\nContext:\n{context}"

_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", _SYSTEM_PROMPT),
        ("human", _USER_TEMPLATE),
    ]
)

EMPTY_ANSWER_FALLBACK = "I could not generate an answer."

_ROLE_BY_TYPE = {"human": "user", "ai": "assistant", "system": "system"}

Generator = Callable[[GenerateParams], Awaitable[LlmRunResult]]


class AnswerComposer:
    """Builds the grounding prompt and delegates generation to the LLM."""

    def __init__(self, generate: Generator | None = None) -> None:
        self._generate = generate or generate_text

    async def compose(self, retrieval: RetrievalResult) -> AnswerResult:
        """Generate an answer for a retrieval with at least one match.

        The returned steps repeat the retrieval stages up to snippet building,
        then `GENERATING_ANSWER` and `DONE`. An empty generation is replaced
        by a fixed fallback sentence.
        """

        if not retrieval.results:
            raise ValueError("AnswerComposer requires at least one retrieval match")

        trace = StageTrace(step for step in retrieval.steps if step is not RetrievalStep.DONE)
        trace.record(RetrievalStep.GENERATING_ANSWER)

        run = await self._generate(build_generate_params(retrieval.query, retrieval.results))
        trace.record(RetrievalStep.DONE)

        if not run.text:
            logger.warning(
                "Empty generation from provider=%s model=%s; using fallback answer",
                run.provider.value,
                run.model,
            )

        return AnswerResult(
            steps=trace.as_list(),
            query=retrieval.query,
            results=list(retrieval.results),
            answer=run.text or EMPTY_ANSWER_FALLBACK,
        )


def build_context(results: list[RetrievalMatch]) -> str:
    return "\n\n".join(
        f"Source {index}: {match.title} ({match.relative_path})\n{match.snippet}"
        for index, match in enumerate(results, start=1)
    )


def build_generate_params(query: str, results: list[RetrievalMatch]) -> GenerateParams:
    """Render the system instruction and the question-plus-sources message."""

    rendered = _PROMPT.format_messages(question=query, context=build_context(results))
    system_parts: list[str] = []
    messages: list[LlmMessage] = []
    for message in rendered:
        role = _ROLE_BY_TYPE.get(message.type, "user")
        if role == "system":
            system_parts.append(str(message.content))
        else:
            messages.append(LlmMessage(role=role, content=str(message.content)))
    return GenerateParams(system="\n\n".join(system_parts) or None, messages=messages)
