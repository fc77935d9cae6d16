from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from riichi_scoring.config import settings
from riichi_scoring.errors import ScoringError
from riichi_scoring.hand_scoring import score_hand_shape
from riichi_scoring.logging import setup_logging
from riichi_scoring.schemas import ErrorBody, ErrorResponse, ScoreRequest, ScoreResponse
from riichi_scoring.validators import validate_score_request

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_title, version=settings.app_version)


@app.exception_handler(ScoringError)
async def scoring_error_handler(request: Request, exc: ScoringError) -> JSONResponse:
    logger.info("score rejected: %s (%s)", exc.code, exc.message)
    body = ErrorResponse(error=ErrorBody(code=exc.code, message=exc.message, details=exc.details))
    return JSONResponse(status_code=422, content=body.model_dump())


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": settings.app_title,
        "docs": "/docs",
        "health": "/health",
        "score": "/api/v1/score",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    validate_score_request(req)
    result = score_hand_shape(req.hand, req.context, req.rules)
    warnings: list[str] = []
    if req.context.ura_dora_indicators and not req.context.any_riichi:
        warnings.append("ura_dora_indicators are ignored without riichi")
    return ScoreResponse(status="ok", result=result, warnings=warnings)
