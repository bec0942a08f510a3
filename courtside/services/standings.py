"""Standings queries against a division's store.

Query contract:
- standings JOIN conferences ON standings.conference_id = conferences.id
- ordered by conference name, then overall win percentage (best first)
- optionally filtered by lowercased, trimmed school name
"""

from collections.abc import Iterable

from sqlalchemy import Select, func, select

from courtside.models import Conference, Standing
from courtside.schemas import Gender, StandingRow
from courtside.stores.postgres import get_session


def _joined_query() -> Select:
    return (
        select(Standing, Conference.name.label("conference_name"))
        .join(Conference, Standing.conference_id == Conference.id)
        .order_by(Conference.name, Standing.overall_pct.desc())
    )


def _to_row(standing: Standing, conference_name: str) -> StandingRow:
    return StandingRow(
        id=standing.id,
        conference_id=standing.conference_id,
        school=standing.school,
        overall_wins=standing.overall_wins,
        overall_losses=standing.overall_losses,
        overall_pct=standing.overall_pct,
        conference_wins=standing.conference_wins,
        conference_losses=standing.conference_losses,
        conference_pct=standing.conference_pct,
        streak=standing.streak,
        conference_name=conference_name,
    )


async def get_standings(gender: Gender) -> list[StandingRow]:
    """Get every standings row for a division, joined with its conference."""
    async with get_session(gender) as session:
        result = await session.execute(_joined_query())
        return [_to_row(standing, name) for standing, name in result.all()]


async def find_standings_by_schools(gender: Gender, schools: Iterable[str]) -> list[StandingRow]:
    """Get rows whose school matches one of `schools`.

    Args:
        gender: Division to query.
        schools: School names, already lowercased and trimmed.

    Returns:
        Matching rows in the standard join order. Unknown names match nothing.
    """
    names = sorted({s for s in schools if s})
    if not names:
        return []

    query = _joined_query().where(func.lower(func.trim(Standing.school)).in_(names))
    async with get_session(gender) as session:
        result = await session.execute(query)
        return [_to_row(standing, name) for standing, name in result.all()]
