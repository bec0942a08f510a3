"""Schemas for the analyze endpoint (POST /analyze)."""

from pydantic import BaseModel, Field, field_validator

from courtside.schemas.common import Gender
from courtside.schemas.standings import StandingRow


class AnalyzeRequest(BaseModel):
    """Request body: { teams: string[], gender?: "men" | "women" }."""

    teams: list[str] = Field(min_length=1)
    gender: Gender = Gender.WOMEN

    @field_validator("teams")
    @classmethod
    def _require_named_team(cls, v: list[str]) -> list[str]:
        if not any(team.strip() for team in v):
            raise ValueError("at least one non-blank team name is required")
        return v


class AnalyzeResponse(BaseModel):
    """Composite analysis payload, cached verbatim.

    `teams` echoes the request; `stats` holds the matched standings rows;
    `timestamp` is epoch milliseconds at the time the analysis was built.
    """

    response: str
    teams: list[str]
    stats: list[StandingRow] = Field(default_factory=list)
    timestamp: int
