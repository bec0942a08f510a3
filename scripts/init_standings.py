#!/usr/bin/env python3
"""Standings (re)initialization job for cron.

Behavior:
- For each division in INIT_GENDERS: fetch the NCAA standings feed and
  replace that division's conferences + standings (same as GET /init-db-{gender})

Run (local / cron):
  python -m scripts.init_standings

Optional env vars:
  INIT_GENDERS="men,women"
  INIT_REFRESH=1            # bypass the cached upstream snapshot
"""

import asyncio
import os
import sys


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from courtside.schemas import Gender  # noqa: E402
from courtside.services.initializer import initialize_division  # noqa: E402
from courtside.services.ncaa_client import close_ncaa_client  # noqa: E402
from courtside.settings import get_settings  # noqa: E402
from courtside.stores.postgres import close_db, init_db, ping_db  # noqa: E402
from courtside.stores.redis import close_redis, init_redis  # noqa: E402


def _parse_genders(raw: str) -> list[Gender]:
    if not raw.strip():
        return [Gender.MEN, Gender.WOMEN]
    return [Gender(p.strip().lower()) for p in raw.split(",") if p.strip()]


async def main() -> None:
    genders = _parse_genders(os.getenv("INIT_GENDERS", ""))
    refresh = os.getenv("INIT_REFRESH", "").strip() == "1"

    settings = get_settings()
    await init_db({g: settings.database_url_for(g) for g in genders})
    await ping_db()
    try:
        await init_redis()
    except Exception:
        # Runs without Redis too; every run then hits the NCAA API.
        pass

    try:
        results = {}
        for gender in genders:
            stats = await initialize_division(gender, refresh=refresh)
            results[gender.value] = stats.model_dump()
        print({"ok": True, "refresh": refresh, "divisions": results})
    finally:
        await close_ncaa_client()
        await close_redis()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
