"""Schemas for standings rows and database initialization."""

from pydantic import BaseModel, ConfigDict, Field

from courtside.schemas.common import Gender


class StandingRow(BaseModel):
    """A standings row joined with its conference name.

    Shape of one element of GET /api/stats and of `stats` in /analyze.
    """

    id: int
    conference_id: int
    school: str
    overall_wins: int = 0
    overall_losses: int = 0
    overall_pct: float = 0.0
    conference_wins: int = 0
    conference_losses: int = 0
    conference_pct: float = 0.0
    streak: str | None = None
    conference_name: str

    model_config = ConfigDict(from_attributes=True)


class InitializationStats(BaseModel):
    """Counters from one initialization run."""

    conferences_inserted: int = 0
    conferences_skipped: int = 0
    teams_inserted: int = 0
    teams_skipped: int = 0


class InitializationResponse(BaseModel):
    """Response from GET /init-db-{gender}."""

    success: bool = True
    gender: Gender
    stats: InitializationStats = Field(default_factory=InitializationStats)
