"""API routes."""

from fastapi import APIRouter

from courtside.routes import admin, analyze, pages, stats

api_router = APIRouter()

# HTML pages
api_router.include_router(pages.router, tags=["pages"])

# Standings read API
api_router.include_router(stats.router, prefix="/api", tags=["stats"])

# LLM analysis
api_router.include_router(analyze.router, tags=["analyze"])

# Store (re)initialization
api_router.include_router(admin.router, tags=["admin"])
