"""FastAPI application entry point.

Courtside Analyst API - NCAA basketball standings and LLM team analysis.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator, Awaitable, Callable
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from courtside.routes import api_router
from courtside.services.ncaa_client import close_ncaa_client
from courtside.settings import get_settings
from courtside.stores.postgres import init_db, close_db, ping_db
from courtside.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")

CORS_ALLOW_METHODS = ["GET", "HEAD", "POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Accept"]


def cors_headers(allow_all_origins: bool = True) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }
    if allow_all_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    return headers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    try:
        await init_db()
        await ping_db()
    except Exception:
        logger.exception("Database init failed")

    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await close_ncaa_client()
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    allow_all_origins = "*" in settings.cors_origins

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="NCAA basketball standings and LLM team analysis",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    # CORS middleware (Origin handling on simple requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    # Outermost: request log, every OPTIONS preflight, CORS headers on every response
    @app.middleware("http")
    async def stamp_cors_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        logger.info(f"Received {request.method} request to {request.url.path}")
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=cors_headers(allow_all_origins))

        response = await call_next(request)
        for key, value in cors_headers(allow_all_origins).items():
            response.headers.setdefault(key, value)
        return response

    # Unmatched path or method -> plain-text 404
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning { "error": str }."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) if settings.debug else "Internal server error"},
            headers=cors_headers(allow_all_origins),
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "courtside.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
