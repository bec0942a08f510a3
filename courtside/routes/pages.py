"""Static HTML pages.

GET /       - team analysis form (posts to /analyze)
GET /stats  - conference charts (reads /api/stats)
"""

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

PAGES_DIR = Path(__file__).resolve().parent.parent / "pages"


@lru_cache
def load_page(name: str) -> str:
    """Read an HTML page shipped with the package."""
    return (PAGES_DIR / name).read_text(encoding="utf-8")


@router.get("/", response_class=HTMLResponse)
async def analysis_page() -> HTMLResponse:
    return HTMLResponse(load_page("index.html"))


@router.get("/stats", response_class=HTMLResponse)
async def stats_page() -> HTMLResponse:
    return HTMLResponse(load_page("stats.html"))
