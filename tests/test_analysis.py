"""Tests for the analyze orchestrator (store, LLM and Redis faked)."""

import asyncio
import json

import pytest

from courtside.schemas import Gender, StandingRow
from courtside.services import analysis
from courtside.services.analysis import (
    FALLBACK_MESSAGE,
    analyze_teams,
    build_team_messages,
    cache_fingerprint,
    normalize_team_names,
    stats_summary,
)
from courtside.services.inference import InferenceError
from courtside.settings import get_settings
from courtside.stores.redis import MAX_ENTRY_AGE_MS, analyze_cache_key, now_ms

CAROLINA = StandingRow(
    id=1,
    conference_id=1,
    school="South Carolina",
    overall_wins=29,
    overall_losses=1,
    overall_pct=0.967,
    conference_wins=16,
    conference_losses=0,
    conference_pct=1.0,
    streak="Won 12",
    conference_name="SEC",
)
UCONN = StandingRow(
    id=3,
    conference_id=2,
    school="UConn",
    overall_wins=28,
    overall_losses=3,
    overall_pct=0.903,
    conference_wins=18,
    conference_losses=0,
    conference_pct=1.0,
    conference_name="Big East",
)


class FakeStore:
    def __init__(self, rows: list[StandingRow]) -> None:
        self.rows = rows
        self.calls: list[tuple[Gender, list[str]]] = []

    async def find(self, gender: Gender, schools) -> list[StandingRow]:
        schools = list(schools)
        self.calls.append((gender, schools))
        return [r for r in self.rows if r.school.lower() in schools]


class FakeLlm:
    def __init__(self, fail_for: set[str] | None = None, delay: float = 0.0) -> None:
        self.fail_for = fail_for or set()
        self.delay = delay
        self.prompts: list[str] = []

    async def __call__(self, messages, **kwargs) -> str:
        user = messages[-1]["content"]
        self.prompts.append(user)
        if self.delay:
            await asyncio.sleep(self.delay)
        for school in self.fail_for:
            if f"Team: {school}\n" in user:
                raise InferenceError("LLM responded with status 500")
        return "Looks like a contender."


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeStore:
    fake = FakeStore([CAROLINA, UCONN])
    monkeypatch.setattr(analysis, "find_standings_by_schools", fake.find)
    return fake


@pytest.fixture
def llm(monkeypatch: pytest.MonkeyPatch) -> FakeLlm:
    fake = FakeLlm()
    monkeypatch.setattr(analysis, "chat_completion", fake)
    return fake


def _cache_key(teams: list[str], gender: Gender = Gender.WOMEN) -> str:
    return analyze_cache_key(gender, cache_fingerprint(normalize_team_names(teams)))


class TestHelpers:
    def test_normalize_team_names(self):
        assert normalize_team_names(["  UConn ", "uconn", "", "LSU"]) == ["uconn", "lsu"]

    def test_fingerprint_ignores_order(self):
        assert cache_fingerprint(["uconn", "lsu"]) == cache_fingerprint(["lsu", "uconn"])
        assert cache_fingerprint(["uconn"]) != cache_fingerprint(["lsu"])

    def test_cache_key_depends_on_division(self):
        assert _cache_key(["UConn"], Gender.MEN) != _cache_key(["UConn"], Gender.WOMEN)

    def test_stats_summary(self):
        assert stats_summary(CAROLINA) == (
            "South Carolina (SEC) is 29-1 overall (.967) and 16-0 in conference play (1.000). "
            "Current streak: Won 12."
        )
        assert "streak" not in stats_summary(UCONN)

    def test_team_prompt_embeds_record(self):
        system, user = build_team_messages(CAROLINA, Gender.WOMEN)
        assert system["role"] == "system"
        assert "Women's Basketball" in system["content"]
        assert "Conference: SEC" in user["content"]
        assert "29-1" in user["content"]
        assert "16-0" in user["content"]
        assert "Won 12" in user["content"]

        system, _ = build_team_messages(CAROLINA, Gender.MEN)
        assert "Men's Basketball" in system["content"]


@pytest.mark.asyncio
async def test_miss_builds_and_caches_response(fake_cache, store, llm):
    teams = ["South Carolina", " UConn "]

    result = await analyze_teams(teams, Gender.WOMEN)

    assert result["teams"] == teams
    assert result["response"] == (
        "South Carolina: Looks like a contender.\n\nUConn: Looks like a contender."
    )
    assert [row["school"] for row in result["stats"]] == ["South Carolina", "UConn"]
    assert store.calls == [(Gender.WOMEN, ["south carolina", "uconn"])]
    assert len(llm.prompts) == 2

    entry = json.loads(fake_cache.data[_cache_key(teams)])
    assert entry["payload"] == result
    assert entry["timestamp"] == result["timestamp"]
    assert entry["gender"] == "women"


@pytest.mark.asyncio
async def test_fresh_hit_is_served_without_store_or_llm(fake_cache, store, llm):
    teams = ["UConn"]
    cached = {"response": "cached", "teams": teams, "stats": [], "timestamp": now_ms()}
    fake_cache.data[_cache_key(teams)] = json.dumps(
        {"timestamp": now_ms() - (MAX_ENTRY_AGE_MS - 60_000), "payload": cached, "gender": "women"}
    )

    result = await analyze_teams(teams, Gender.WOMEN)

    assert result == cached
    assert store.calls == []
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_stale_entry_is_never_served(fake_cache, store, llm):
    teams = ["UConn"]
    fake_cache.data[_cache_key(teams)] = json.dumps(
        {
            "timestamp": now_ms() - MAX_ENTRY_AGE_MS,
            "payload": {"response": "stale", "teams": teams, "stats": [], "timestamp": 0},
            "gender": "women",
        }
    )

    result = await analyze_teams(teams, Gender.WOMEN)

    assert result["response"] == "UConn: Looks like a contender."
    assert len(llm.prompts) == 1


@pytest.mark.asyncio
async def test_second_request_is_served_from_cache(fake_cache, store, llm):
    first = await analyze_teams(["UConn", "South Carolina"], Gender.WOMEN)
    second = await analyze_teams(["south carolina", "uconn"], Gender.WOMEN)

    assert second["teams"] == ["south carolina", "uconn"]
    assert {k: v for k, v in second.items() if k != "teams"} == {
        k: v for k, v in first.items() if k != "teams"
    }
    assert len(llm.prompts) == 2


@pytest.mark.asyncio
async def test_cache_hit_echoes_callers_team_spelling(fake_cache, store, llm):
    await analyze_teams(["UConn"], Gender.WOMEN)
    second = await analyze_teams([" uconn "], Gender.WOMEN)

    assert second["teams"] == [" uconn "]
    assert second["response"] == "UConn: Looks like a contender."
    assert len(llm.prompts) == 1


@pytest.mark.asyncio
async def test_unknown_team_gets_no_inference_call(fake_cache, store, llm):
    result = await analyze_teams(["UConn", "Gonzaga"], Gender.WOMEN)

    assert result["teams"] == ["UConn", "Gonzaga"]
    assert [row["school"] for row in result["stats"]] == ["UConn"]
    assert len(llm.prompts) == 1
    assert "Gonzaga" not in result["response"]


@pytest.mark.asyncio
async def test_no_matches_returns_message_without_caching(fake_cache, store, llm):
    result = await analyze_teams(["Gonzaga"], Gender.WOMEN)

    assert "Gonzaga" in result["response"]
    assert result["stats"] == []
    assert llm.prompts == []
    assert fake_cache.data == {}


@pytest.mark.asyncio
async def test_partial_llm_failure_uses_stats_sentence(fake_cache, store, monkeypatch):
    monkeypatch.setattr(analysis, "chat_completion", FakeLlm(fail_for={"UConn"}))

    result = await analyze_teams(["South Carolina", "UConn"], Gender.WOMEN)

    parts = result["response"].split("\n\n")
    assert parts[0] == "South Carolina: Looks like a contender."
    assert parts[1] == stats_summary(UCONN)


@pytest.mark.asyncio
async def test_llm_unreachable_for_all_teams(fake_cache, store, monkeypatch):
    monkeypatch.setattr(analysis, "chat_completion", FakeLlm(fail_for={"UConn", "South Carolina"}))

    result = await analyze_teams(["South Carolina", "UConn"], Gender.WOMEN)

    assert result["response"] == f"{stats_summary(CAROLINA)}\n\n{stats_summary(UCONN)}"
    assert len(result["stats"]) == 2


@pytest.mark.asyncio
async def test_fan_out_timeout_returns_fallback(fake_cache, store, monkeypatch):
    settings = get_settings().model_copy(update={"analyze_timeout_seconds": 0.01})
    monkeypatch.setattr(analysis, "get_settings", lambda: settings)
    monkeypatch.setattr(analysis, "chat_completion", FakeLlm(delay=1.0))

    result = await analyze_teams(["UConn"], Gender.WOMEN)

    assert result["response"] == FALLBACK_MESSAGE
    assert result["teams"] == ["UConn"]
    assert [row["school"] for row in result["stats"]] == ["UConn"]
    assert fake_cache.data == {}


@pytest.mark.asyncio
async def test_fan_out_error_returns_fallback(fake_cache, store, monkeypatch):
    async def broken_analyze_team(row, gender):
        raise RuntimeError("event loop trouble")

    monkeypatch.setattr(analysis, "analyze_team", broken_analyze_team)

    result = await analyze_teams(["UConn"], Gender.WOMEN)

    assert result["response"] == FALLBACK_MESSAGE
    assert fake_cache.data == {}


@pytest.mark.asyncio
async def test_store_failure_propagates(fake_cache, llm, monkeypatch):
    async def broken_store(gender, schools):
        raise RuntimeError("Database for women not initialized. Call init_db() first.")

    monkeypatch.setattr(analysis, "find_standings_by_schools", broken_store)

    with pytest.raises(RuntimeError):
        await analyze_teams(["UConn"], Gender.WOMEN)


@pytest.mark.asyncio
async def test_works_without_redis(store, llm):
    result = await analyze_teams(["UConn"], Gender.WOMEN)
    assert result["response"] == "UConn: Looks like a contender."
