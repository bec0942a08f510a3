"""Admin endpoints for (re)populating the division stores.

GET /init-db-men   - replace the men's store with the NCAA standings feed
GET /init-db-women - same for the women's store

In production, consider adding authentication (API key or admin token).
"""

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from courtside.schemas import ErrorResponse, Gender, InitializationResponse
from courtside.services.initializer import initialize_division

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


async def _run_initialization(gender: Gender, refresh: bool) -> JSONResponse:
    try:
        stats = await initialize_division(gender, refresh=refresh)
    except Exception:
        logger.exception(f"Initialization of {gender.value} store failed")
        return JSONResponse(status_code=500, content={"error": "Failed to initialize database"})

    body = InitializationResponse(gender=gender, stats=stats)
    return JSONResponse(content=body.model_dump(mode="json"))


@router.get(
    "/init-db-men",
    response_model=InitializationResponse,
    responses={500: {"model": ErrorResponse}},
)
async def init_db_men(
    refresh: bool = Query(default=False, description="Bypass the cached upstream snapshot"),
) -> JSONResponse:
    """Replace the men's conferences and standings."""
    return await _run_initialization(Gender.MEN, refresh)


@router.get(
    "/init-db-women",
    response_model=InitializationResponse,
    responses={500: {"model": ErrorResponse}},
)
async def init_db_women(
    refresh: bool = Query(default=False, description="Bypass the cached upstream snapshot"),
) -> JSONResponse:
    """Replace the women's conferences and standings."""
    return await _run_initialization(Gender.WOMEN, refresh)
