"""FastAPI entrypoint for the studio retrieve/answer endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio_studio.agent.service import StudioService, build_service
from portfolio_studio.config import resolve_llm_config
from portfolio_studio.errors import ConfigurationError
from portfolio_studio.obs.logging import get_logger, setup_logging
from portfolio_studio.types import AnswerResult, RetrievalResult

setup_logging()
logger = get_logger(__name__)


class QueryRequest(BaseModel):
    # Non-string values are treated as an empty query rather than rejected by schema.
    query: Any = None

    def normalized_query(self) -> str:
        return self.query.strip() if isinstance(self.query, str) else ""


def get_studio_service() -> StudioService:
    return build_service()


app = FastAPI(title="Portfolio Studio", version="0.1.0")

INVALID_BODY_MESSAGE = "Request body must be a JSON object with a query field."


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body path=%s errors=%d", request.url.path, len(exc.errors()))
    return _error(INVALID_BODY_MESSAGE, status_code=400)


@app.get("/health")
def health(service: StudioService = Depends(get_studio_service)) -> dict[str, Any]:
    try:
        llm_config = resolve_llm_config()
    except ConfigurationError as exc:
        llm_configured = False
        llm_provider = None
        llm_error: str | None = str(exc)
    else:
        llm_configured = True
        llm_provider = llm_config.provider.value
        llm_error = None

    try:
        document_count: int | None = len(service.retriever.source.list_documents())
    except OSError:
        logger.exception("Knowledge base could not be read")
        document_count = None

    return {
        "status": "ok",
        "llm_configured": llm_configured,
        "llm_provider": llm_provider,
        "llm_error": llm_error,
        "document_count": document_count,
    }


@app.post("/api/studio/retrieve")
def retrieve(
    request: QueryRequest,
    service: StudioService = Depends(get_studio_service),
) -> JSONResponse:
    query = request.normalized_query()
    try:
        error_message = service.validate(query)
        if error_message:
            return _error(error_message, status_code=400)

        retrieval = service.retrieve(query)
    except Exception as exc:
        logger.exception("Retrieval failed")
        return _error(str(exc) or "Unknown error", status_code=500)

    logger.info(
        "Retrieval completed query_chars=%d results=%d", len(query), len(retrieval.results)
    )
    return JSONResponse(_retrieval_payload(retrieval), status_code=200)


@app.post("/api/studio/answer")
async def answer(
    request: QueryRequest,
    service: StudioService = Depends(get_studio_service),
) -> JSONResponse:
    query = request.normalized_query()
    try:
        error_message = service.validate(query)
        if error_message:
            return _error(error_message, status_code=400)

        result = await service.answer(query)
    except Exception as exc:
        logger.exception("Answer generation failed")
        return _error(str(exc) or "Unknown error", status_code=500)

    logger.info(
        "Answer completed query_chars=%d results=%d", len(query), len(result.results)
    )
    return JSONResponse(_answer_payload(result), status_code=200)


def _retrieval_payload(result: RetrievalResult) -> dict[str, Any]:
    return {
        "ok": True,
        "steps": [step.value for step in result.steps],
        "query": result.query,
        "results": [match.to_payload() for match in result.results],
    }


def _answer_payload(result: AnswerResult) -> dict[str, Any]:
    return {
        "ok": True,
        "steps": [step.value for step in result.steps],
        "query": result.query,
        "results": [match.to_payload() for match in result.results],
        "answer": result.answer,
    }


def _error(message: str, *, status_code: int) -> JSONResponse:
    return JSONResponse({"ok": False, "errorMessage": message}, status_code=status_code)
