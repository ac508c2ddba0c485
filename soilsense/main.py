"""FastAPI application entrypoint — lifespan, routers, middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from redis.exceptions import RedisError

from soilsense.config import get_settings
from soilsense.database import async_session_factory, create_schema, engine
from soilsense.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from soilsense.routes import crops, soil, sync
from soilsense.services.offline_store import OfflineStore, RedisKeyValueStore, SqlKeyValueStore

logger = logging.getLogger("soilsense")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Create the offline_records table (primary tier)
      3. Connect to Redis (fallback tier); an unreachable Redis is tolerated
      4. Assemble the tiered offline store

    Shutdown:
      1. Close Redis connection pool
      2. Dispose SQLAlchemy engine
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "SoilSense starting",
        extra={"log_level": settings.log_level, "sync_endpoint": settings.sync_endpoint},
    )

    try:
        await create_schema(engine)
    except Exception as exc:
        logger.exception("startup failure", extra={"error": str(exc)})
        raise

    redis = Redis.from_url(settings.redis_url, decode_responses=True)
    try:
        await redis.ping()
    except RedisError as exc:
        logger.warning("fallback tier unreachable at startup", extra={"error": str(exc)})

    app.state.redis = redis
    app.state.offline_store = OfflineStore(
        primary=SqlKeyValueStore(async_session_factory),
        fallback=RedisKeyValueStore(redis, prefix=settings.offline_key_prefix),
    )

    yield

    logger.info("SoilSense shutting down")
    await redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="SoilSense API",
    description=(
        "Farm advisory API — soil health rating, explainable crop suitability "
        "ranking, and an offline-first store that syncs to a remote endpoint."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check — verifies the API process is alive."""
    return {
        "status": "ok",
        "service": "soilsense",
        "version": "0.1.0",
    }


# ── Router registration ────────────────────────────────────────────────────
app.include_router(soil.router, prefix="/api/v1")
app.include_router(crops.router, prefix="/api/v1")
app.include_router(sync.router, prefix="/api/v1")
