"""Client for the NCAA standings API (https://ncaa-api.fly.dev).

Endpoint:
- GET {base}/standings/basketball-{men|women}/d1
  -> { "data": [ { "conference": str, "standings": [ {..team..}, ... ] }, ... ] }

Team records come back with the column headers of ncaa.com as keys, e.g.
{"School": "South Carolina", "Conference W": "16", "Conference L": "0",
 "Conference PCT": "1.000", "Overall W": "29", "Overall L": "1",
 "Overall PCT": "0.967", "Streak": "Won 12"}.

Caching:
- The raw payload is cached per division in Redis as a timestamped entry
  and reused while younger than one hour.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from courtside.schemas.common import Gender
from courtside.settings import get_settings
from courtside.stores.redis import get_fresh_entry, set_entry, standings_cache_key

logger = logging.getLogger("uvicorn.error")


class NcaaApiError(RuntimeError):
    pass


@dataclass
class ConferenceStandings:
    """One conference block from the standings feed.

    `standings` is None when the upstream block carries no list.
    """

    conference: str
    standings: list[dict[str, Any]] | None = field(default=None)


class NcaaApiClient:
    """Async client for the NCAA standings API."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        settings = get_settings()
        self.base_url = (base_url or settings.ncaa_api_base_url).rstrip("/")
        self.timeout = timeout or settings.ncaa_api_timeout
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def standings_url(self, gender: Gender) -> str:
        return f"{self.base_url}/standings/basketball-{gender.value}/d1"

    async def fetch_standings(
        self,
        gender: Gender,
        use_cache: bool = True,
    ) -> list[ConferenceStandings]:
        """Fetch D1 basketball standings for a division.

        Args:
            gender: Division to fetch.
            use_cache: Reuse a Redis snapshot younger than one hour (default: True).
                The snapshot is refreshed after every network fetch either way.

        Returns:
            Conference blocks in upstream order.

        Raises:
            NcaaApiError: Upstream returned a non-2xx status or an unexpected body.
        """
        cache_key = standings_cache_key(gender)

        if use_cache:
            try:
                cached = await get_fresh_entry(cache_key)
                if cached is not None:
                    logger.info(f"NCAA standings cache HIT for {gender.value}")
                    return parse_standings_payload(cached)
            except Exception as e:
                logger.warning(f"Redis cache read failed: {e}")

        url = self.standings_url(gender)
        logger.info(f"NCAA standings cache MISS, calling {url}")

        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise NcaaApiError(f"NCAA API request failed: {e}") from e

        if not response.is_success:
            logger.error(f"NCAA API error: {response.status_code} - {response.text[:200]}")
            raise NcaaApiError(f"API responded with status: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise NcaaApiError("NCAA API returned a non-JSON body") from e

        conferences = parse_standings_payload(payload)

        try:
            await set_entry(cache_key, payload, gender=gender)
        except Exception as e:
            logger.warning(f"Redis cache write failed: {e}")

        return conferences


def parse_standings_payload(payload: Any) -> list[ConferenceStandings]:
    """Parse the `{data: [...]}` envelope into conference blocks.

    Blocks that are not objects are dropped. Field-level validation
    (names, counts) is left to the caller.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise NcaaApiError("Unexpected response shape from NCAA API (missing data list)")

    conferences: list[ConferenceStandings] = []
    for block in payload["data"]:
        if not isinstance(block, dict):
            continue
        name = block.get("conference")
        standings = block.get("standings")
        conferences.append(
            ConferenceStandings(
                conference=str(name).strip() if name else "",
                standings=[t for t in standings if isinstance(t, dict)] if isinstance(standings, list) else None,
            )
        )
    return conferences


# Singleton client
_client: NcaaApiClient | None = None


def get_ncaa_client() -> NcaaApiClient:
    """Get singleton NCAA API client."""
    global _client
    if _client is None:
        _client = NcaaApiClient()
    return _client


async def close_ncaa_client() -> None:
    """Close singleton NCAA API client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
