"""FastAPI application entrypoint — lifespan, routers, middleware, SPA fallback."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from redis.asyncio import Redis
from sqlalchemy import text

from kissan.config import get_settings
from kissan.database import engine
from kissan.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from kissan.middleware.rate_limit import RateLimitMiddleware
from kissan.routes import ai, assistant, auth, farms, market, session, weather, ws

logger = structlog.get_logger("kissan")

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Verify the database answers
      3. Connect to Redis when configured (rate limiting stays off otherwise)

    Shutdown:
      1. Close Redis connection pool
      2. Dispose SQLAlchemy engine
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "kissan_starting",
        log_level=settings.log_level,
        rate_limiting=settings.redis_url is not None,
        ai_configured=bool(settings.gemini_api_key),
    )

    redis: Redis | None = None
    app.state.redis = None
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

        if settings.redis_url:
            redis = Redis.from_url(settings.redis_url, decode_responses=True)
            await redis.ping()
            app.state.redis = redis
    except Exception as exc:
        logger.exception("startup_failure", error=str(exc))
        raise

    yield

    logger.info("kissan_shutting_down")
    if redis is not None:
        await redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="Smart Kissan API",
    description=(
        "Farmer assistant backend — weather, mandi prices, crop diagnosis, "
        "expert chat, voice commands and government schemes."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── Middleware ──────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check — verifies the API process is alive."""
    return {
        "status": "ok",
        "service": "smart-kissan",
        "version": "0.1.0",
    }


# ── Router registration ────────────────────────────────────────────────────
app.include_router(weather.router, prefix=API_PREFIX)
app.include_router(market.router, prefix=API_PREFIX)
app.include_router(ai.router, prefix=API_PREFIX)
app.include_router(assistant.router, prefix=API_PREFIX)
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(session.router, prefix=API_PREFIX)
app.include_router(farms.router, prefix=API_PREFIX)
app.include_router(ws.router)


# ── SPA fallback ────────────────────────────────────────────────────────────
def _static_file(root: Path, full_path: str) -> Path | None:
    if not full_path:
        return None
    candidate = (root / full_path).resolve()
    if not candidate.is_relative_to(root.resolve()) or not candidate.is_file():
        return None
    return candidate


@app.get("/{full_path:path}", include_in_schema=False)
async def spa_fallback(full_path: str) -> FileResponse:
    """Serve built client assets, and ``index.html`` for every other client route."""
    if f"/{full_path}".startswith(f"{API_PREFIX}/") or full_path == API_PREFIX.strip("/"):
        raise HTTPException(status_code=404, detail="Not Found")

    root = Path(get_settings().static_dir)
    asset = _static_file(root, full_path)
    if asset is not None:
        return FileResponse(asset)

    index = root / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="client bundle not built")
    return FileResponse(index)
