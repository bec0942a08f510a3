"""Stats endpoint.

GET /api/stats?gender=men|women - every standings row of a division,
joined with its conference, ordered by conference then overall win pct.
"""

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from courtside.schemas import ErrorResponse, Gender, StandingRow
from courtside.services.standings import get_standings

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get(
    "/stats",
    response_model=list[StandingRow],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_stats(
    gender: str = Query(
        default=Gender.WOMEN.value,
        description="Division to read",
        examples=["women", "men"],
    ),
) -> JSONResponse:
    """Return the division's standings as a JSON array."""
    try:
        division = Gender(gender.strip().lower())
    except ValueError:
        return JSONResponse(status_code=400, content={"error": f"Unknown gender: {gender}"})

    try:
        rows = await get_standings(division)
    except Exception:
        logger.exception(f"Database error reading {division.value} standings")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch stats"})

    return JSONResponse(content=[row.model_dump(mode="json") for row in rows])
