"""Analyze endpoint.

POST /analyze  body: { "teams": string[], "gender"?: "men" | "women" }

Status codes:
- 200: analysis (possibly stats-only when the LLM is unavailable)
- 400: missing/empty team list or unknown gender
- 503: unreadable body or store failure
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from courtside.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from courtside.services.analysis import analyze_teams

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

TEAMS_REQUIRED_MESSAGE = "Please provide at least one team name"


def _validation_message(exc: ValidationError) -> str:
    for error in exc.errors():
        if error.get("loc") and error["loc"][0] == "gender":
            return "gender must be 'men' or 'women'"
    return TEAMS_REQUIRED_MESSAGE


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def analyze(request: Request) -> JSONResponse:
    """Analyze the requested teams' standings with the LLM."""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Rejected /analyze request with malformed JSON body")
        return JSONResponse(status_code=503, content={"error": "Request body must be valid JSON"})

    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content={"error": TEAMS_REQUIRED_MESSAGE})

    try:
        payload = AnalyzeRequest.model_validate(body)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": _validation_message(e)})

    try:
        result = await analyze_teams(payload.teams, payload.gender)
    except Exception:
        logger.exception("Analysis failed")
        return JSONResponse(status_code=503, content={"error": "Service temporarily unavailable"})

    return JSONResponse(content=result)
