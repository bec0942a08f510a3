"""Analyze orchestrator: cache -> store -> per-team LLM fan-out -> cache.

Flow:
1. Normalize requested team names (trim + lowercase) and derive the cache key
   from the division and the sorted names
2. Serve a cached composite response verbatim if younger than one hour
3. Otherwise look up the matching standings rows in the division's store
4. Ask the LLM for a short analysis of each matched team, concurrently, with a
   single timer around the whole fan-out
5. Replace any failed per-team call with a stats-only sentence
6. Join the per-team texts with blank lines, cache the composite and return it

If the fan-out as a whole fails (timer expiry or unexpected error) the caller
still gets the stats rows with a fixed fallback message; that result is not cached.
Store errors propagate to the route.
"""

import asyncio
import hashlib
import logging
from typing import Any

from courtside.schemas import AnalyzeResponse, Gender, StandingRow
from courtside.services.inference import chat_completion
from courtside.services.standings import find_standings_by_schools
from courtside.settings import get_settings
from courtside.stores.redis import analyze_cache_key, get_fresh_entry, now_ms, set_entry

logger = logging.getLogger("uvicorn.error")

FALLBACK_MESSAGE = (
    "AI analysis is temporarily unavailable. "
    "The current standings for the requested teams are included below."
)
NO_MATCH_MESSAGE = "No standings found for: {teams}. Check the team names or try the other division."


def normalize_team_names(teams: list[str]) -> list[str]:
    """Trim + lowercase, dropping blanks and duplicates (first occurrence wins)."""
    normalized = (team.strip().lower() for team in teams)
    return list(dict.fromkeys(name for name in normalized if name))


def cache_fingerprint(names: list[str]) -> str:
    h = hashlib.sha256()
    for name in sorted(names):
        h.update(name.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()[:40]


def _pct(value: float) -> str:
    return f"{value:.3f}".lstrip("0") if value < 1 else f"{value:.3f}"


def stats_summary(row: StandingRow) -> str:
    """Stats-only sentence used when the LLM call for a team fails."""
    sentence = (
        f"{row.school} ({row.conference_name}) is {row.overall_wins}-{row.overall_losses} overall "
        f"({_pct(row.overall_pct)}) and {row.conference_wins}-{row.conference_losses} "
        f"in conference play ({_pct(row.conference_pct)})."
    )
    if row.streak:
        sentence += f" Current streak: {row.streak}."
    return sentence


def build_team_messages(row: StandingRow, gender: Gender) -> list[dict[str, str]]:
    """System + user messages for one team's analysis."""
    system_prompt = (
        f"You are an esteemed basketball analyst focusing on NCAA {gender.label} Basketball. "
        "Provide clear, succinct analysis with specific statistics and context."
    )
    user_prompt = (
        f"Team: {row.school}\n"
        f"Conference: {row.conference_name}\n"
        f"Overall record: {row.overall_wins}-{row.overall_losses} ({_pct(row.overall_pct)})\n"
        f"Conference record: {row.conference_wins}-{row.conference_losses} ({_pct(row.conference_pct)})\n"
        f"Streak: {row.streak or 'n/a'}\n\n"
        "In 3-4 sentences, analyze this team's current performance, its position within "
        "its conference, and any notable trend."
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


async def analyze_team(row: StandingRow, gender: Gender) -> str:
    """LLM analysis for one team, or its stats-only sentence on failure."""
    try:
        text = await chat_completion(build_team_messages(row, gender))
    except Exception as e:
        logger.warning(f"LLM analysis failed for {row.school}, using stats only: {e}")
        return stats_summary(row)
    return f"{row.school}: {text}"


async def _try_get_cached(cache_key: str) -> dict[str, Any] | None:
    try:
        cached = await get_fresh_entry(cache_key)
    except Exception as e:
        logger.warning(f"Redis cache read failed: {e}")
        return None
    return cached if isinstance(cached, dict) else None


async def _try_set_cached(cache_key: str, payload: dict[str, Any], gender: Gender) -> None:
    try:
        await set_entry(cache_key, payload, gender=gender, timestamp=payload["timestamp"])
    except Exception as e:
        logger.warning(f"Redis cache write failed: {e}")


async def analyze_teams(teams: list[str], gender: Gender) -> dict[str, Any]:
    """Build (or serve from cache) the composite analysis for `teams`.

    Args:
        teams: Team names as requested; echoed back unchanged.
        gender: Division whose store and prompts are used.

    Returns:
        AnalyzeResponse payload as a JSON-ready dict.

    Raises:
        SQLAlchemyError / RuntimeError: Store lookup failed.
    """
    names = normalize_team_names(teams)
    cache_key = analyze_cache_key(gender, cache_fingerprint(names))

    cached = await _try_get_cached(cache_key)
    if cached is not None:
        logger.info(f"Analysis cache HIT for {gender.value}: {names}")
        # Key is built from normalized names; echo this caller's spelling
        return {**cached, "teams": teams}

    logger.info(f"Analysis cache MISS for {gender.value}: {names}")
    rows = await find_standings_by_schools(gender, names)
    timestamp = now_ms()

    if not rows:
        return AnalyzeResponse(
            response=NO_MATCH_MESSAGE.format(teams=", ".join(teams)),
            teams=teams,
            stats=[],
            timestamp=timestamp,
        ).model_dump(mode="json")

    try:
        parts = await asyncio.wait_for(
            asyncio.gather(*(analyze_team(row, gender) for row in rows)),
            timeout=get_settings().analyze_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Team analysis timed out for {len(rows)} teams, returning stats only")
        parts = None
    except Exception:
        logger.exception("Team analysis failed, returning stats only")
        parts = None

    if parts is None:
        return AnalyzeResponse(
            response=FALLBACK_MESSAGE,
            teams=teams,
            stats=rows,
            timestamp=timestamp,
        ).model_dump(mode="json")

    payload = AnalyzeResponse(
        response="\n\n".join(parts),
        teams=teams,
        stats=rows,
        timestamp=timestamp,
    ).model_dump(mode="json")
    await _try_set_cached(cache_key, payload, gender)
    return payload
