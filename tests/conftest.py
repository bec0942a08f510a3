"""Shared fixtures: HTTP client, in-memory cache, SQLite division stores."""

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from courtside.main import app
from courtside.schemas import Gender
from courtside.services.ncaa_client import ConferenceStandings, parse_standings_payload
from courtside.settings import get_settings
from courtside.stores import redis as redis_store
from courtside.stores.postgres import close_db, create_tables, drop_tables, init_db


WOMEN_PAYLOAD: dict[str, Any] = {
    "data": [
        {
            "conference": "SEC",
            "standings": [
                {
                    "School": "South Carolina",
                    "Conference W": "16",
                    "Conference L": "0",
                    "Conference PCT": "1.000",
                    "Overall W": "29",
                    "Overall L": "1",
                    "Overall PCT": ".967",
                    "Streak": "Won 12",
                },
                {
                    "School": "LSU",
                    "Conference W": "12",
                    "Conference L": "4",
                    "Conference PCT": ".750",
                    "Overall W": "25",
                    "Overall L": "5",
                    "Overall PCT": ".833",
                    "Streak": "Lost 1",
                },
            ],
        },
        {
            "conference": "Big East",
            "standings": [
                {
                    "School": "UConn",
                    "Conference W": "18",
                    "Conference L": "0",
                    "Conference PCT": "1.000",
                    "Overall W": "28",
                    "Overall L": "3",
                    "Overall PCT": ".903",
                    "Streak": "Won 8",
                },
            ],
        },
    ]
}

MEN_PAYLOAD: dict[str, Any] = {
    "data": [
        {
            "conference": "ACC",
            "standings": [
                {
                    "School": "Duke",
                    "Conference W": "17",
                    "Conference L": "1",
                    "Conference PCT": ".944",
                    "Overall W": "27",
                    "Overall L": "3",
                    "Overall PCT": ".900",
                    "Streak": "Won 4",
                },
            ],
        },
    ]
}


class FakeRedisCache:
    """In-memory stand-in for the raw Redis get/setex calls."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        self.data[key] = value
        self.ttls[key] = ttl


class FakeNcaaClient:
    """Serves canned standings payloads per division."""

    def __init__(self, payloads: dict[Gender, dict[str, Any]]) -> None:
        self.payloads = payloads
        self.calls: list[tuple[Gender, bool]] = []

    async def fetch_standings(self, gender: Gender, use_cache: bool = True) -> list[ConferenceStandings]:
        self.calls.append((gender, use_cache))
        return parse_standings_payload(self.payloads[gender])


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def fake_cache(monkeypatch: pytest.MonkeyPatch) -> FakeRedisCache:
    cache = FakeRedisCache()
    monkeypatch.setattr(redis_store, "cache_get", cache.get)
    monkeypatch.setattr(redis_store, "cache_set", cache.set)
    return cache


@pytest.fixture
def fake_ncaa(monkeypatch: pytest.MonkeyPatch) -> FakeNcaaClient:
    from courtside.services import initializer

    fake = FakeNcaaClient({Gender.WOMEN: WOMEN_PAYLOAD, Gender.MEN: MEN_PAYLOAD})
    monkeypatch.setattr(initializer, "get_ncaa_client", lambda: fake)
    return fake


@pytest.fixture
async def division_stores(tmp_path):
    """One SQLite database per division, schema created."""
    await init_db(
        {
            Gender.MEN: f"sqlite+aiosqlite:///{tmp_path / 'men.db'}",
            Gender.WOMEN: f"sqlite+aiosqlite:///{tmp_path / 'women.db'}",
        }
    )
    await create_tables()
    yield
    await drop_tables()
    await close_db()


@pytest.fixture
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Reload settings from env for the test, restore afterwards."""
    for name in ("LLM_API_KEY", "OPENAI_API_KEY", "LLM_BASE_URL", "OPENAI_BASE_URL", "LLM_MODEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
