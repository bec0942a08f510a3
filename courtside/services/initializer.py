"""Database initializer: NCAA standings feed -> division store.

Flow:
1. Fetch the division's standings from the NCAA API (cached snapshot unless refresh)
2. Delete every standings row, then every conference row
3. For each conference: insert it, then insert its teams one at a time
4. Skip (and log) conferences without a name or standings list, and teams
   without a school name or overall win/loss counts

This is a full replace. Each conference is committed on its own, so a failure
part-way leaves the store partially repopulated until the next run.
"""

import logging
import math
from typing import Any

from sqlalchemy import delete

from courtside.models import Conference, Standing
from courtside.schemas import Gender, InitializationStats
from courtside.services.ncaa_client import ConferenceStandings, get_ncaa_client
from courtside.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

# Upstream column headers (ncaa.com standings table)
KEY_SCHOOL = "School"
KEY_OVERALL_W = "Overall W"
KEY_OVERALL_L = "Overall L"
KEY_OVERALL_PCT = "Overall PCT"
KEY_CONFERENCE_W = "Conference W"
KEY_CONFERENCE_L = "Conference L"
KEY_CONFERENCE_PCT = "Conference PCT"
KEY_STREAK = "Streak"


def parse_int(value: Any) -> int:
    """Parse an integer count, falling back to 0."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        try:
            return int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return 0


def parse_float(value: Any) -> float:
    """Parse a win percentage such as ".750" or "0.750", falling back to 0.0."""
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0
    # nan/inf would break ordering by overall_pct
    return parsed if math.isfinite(parsed) else 0.0


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def is_valid_team(team: dict[str, Any]) -> bool:
    """A team needs a school name and overall win/loss counts."""
    return not (
        _is_blank(team.get(KEY_SCHOOL))
        or _is_blank(team.get(KEY_OVERALL_W))
        or _is_blank(team.get(KEY_OVERALL_L))
    )


def build_standing(team: dict[str, Any], conference_id: int) -> Standing:
    """Map one upstream team record to a Standing row."""
    streak = team.get(KEY_STREAK)
    return Standing(
        conference_id=conference_id,
        school=str(team[KEY_SCHOOL]).strip(),
        overall_wins=parse_int(team.get(KEY_OVERALL_W)),
        overall_losses=parse_int(team.get(KEY_OVERALL_L)),
        overall_pct=parse_float(team.get(KEY_OVERALL_PCT)),
        conference_wins=parse_int(team.get(KEY_CONFERENCE_W)),
        conference_losses=parse_int(team.get(KEY_CONFERENCE_L)),
        conference_pct=parse_float(team.get(KEY_CONFERENCE_PCT)),
        streak=str(streak).strip()[:20] if not _is_blank(streak) else None,
    )


async def clear_division(gender: Gender) -> None:
    """Delete every standings and conference row of a division."""
    async with get_session(gender) as session:
        await session.execute(delete(Standing))
        await session.execute(delete(Conference))


async def _insert_conference(
    gender: Gender,
    block: ConferenceStandings,
    stats: InitializationStats,
) -> None:
    async with get_session(gender) as session:
        conference = Conference(name=block.conference)
        session.add(conference)
        await session.flush()

        for team in block.standings or []:
            if not is_valid_team(team):
                logger.warning(
                    f"Skipping team without school or win/loss counts in {block.conference}: {team}"
                )
                stats.teams_skipped += 1
                continue
            session.add(build_standing(team, conference.id))
            await session.flush()
            stats.teams_inserted += 1

    stats.conferences_inserted += 1


async def initialize_division(gender: Gender, refresh: bool = False) -> InitializationStats:
    """Replace a division's conferences and standings with the NCAA feed.

    Args:
        gender: Division to (re)populate.
        refresh: Bypass the cached upstream snapshot.

    Returns:
        Insert/skip counters.

    Raises:
        NcaaApiError: Upstream fetch failed (store left untouched).
        SQLAlchemyError: Store failure (store may be partially repopulated).
    """
    conferences = await get_ncaa_client().fetch_standings(gender, use_cache=not refresh)
    logger.info(f"Initializing {gender.value} store with {len(conferences)} conferences")

    await clear_division(gender)

    stats = InitializationStats()
    for block in conferences:
        if not block.conference or block.standings is None:
            logger.warning(f"Skipping conference without name or standings: {block.conference!r}")
            stats.conferences_skipped += 1
            continue
        await _insert_conference(gender, block, stats)

    logger.info(
        f"Initialized {gender.value} store: "
        f"conferences={stats.conferences_inserted} (skipped {stats.conferences_skipped}), "
        f"teams={stats.teams_inserted} (skipped {stats.teams_skipped})"
    )
    return stats
