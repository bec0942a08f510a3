"""Pydantic schemas for API request/response validation."""

from courtside.schemas.common import ErrorResponse, Gender
from courtside.schemas.analysis import AnalyzeRequest, AnalyzeResponse
from courtside.schemas.standings import (
    InitializationResponse,
    InitializationStats,
    StandingRow,
)

__all__ = [
    "ErrorResponse",
    "Gender",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "InitializationResponse",
    "InitializationStats",
    "StandingRow",
]
