"""Common schemas used across the API."""

from enum import Enum

from pydantic import BaseModel


class Gender(str, Enum):
    """Basketball division. Selects the store, upstream endpoint and cache keys."""

    MEN = "men"
    WOMEN = "women"

    @property
    def label(self) -> str:
        return "Men's" if self is Gender.MEN else "Women's"


class ErrorResponse(BaseModel):
    """Error response format: { "error": str }."""

    error: str
