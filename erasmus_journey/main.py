"""Erasmus Journey — FastAPI Application Entry Point.

Destination aggregation service: folds student submissions into
per-city destination statistics.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from erasmus_journey.config import settings
from erasmus_journey.database import init_db, test_connection, db_url, _mask_url
from erasmus_journey.scheduler.jobs import refresh_destination_job, start_scheduler, stop_scheduler
from erasmus_journey.scheduler.refresh_queue import RefreshQueue
from erasmus_journey.api.destination_routes import router as destination_router
from erasmus_journey.api.admin_routes import router as admin_router
from erasmus_journey.api.search_routes import router as search_router
from erasmus_journey.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 Erasmus Journey starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — endpoints will fail")

    refresh_queue = RefreshQueue(refresh_destination_job)
    refresh_queue.start()
    app.state.refresh_queue = refresh_queue
    if not IS_SERVERLESS:
        start_scheduler(refresh_queue)
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    await refresh_queue.stop()
    logger.info("Erasmus Journey shut down")


app = FastAPI(
    title="Erasmus Journey",
    description="Aggregates student exchange submissions into destination statistics.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(destination_router)
app.include_router(admin_router)
app.include_router(search_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    backend = "postgresql" if db_url.startswith("postgresql") else "sqlite"
    return {
        "status": "healthy",
        "service": "erasmus-journey",
        "version": "1.0.0",
        "schema_version": settings.aggregation_schema_version,
        "database": {"backend": backend, "url": _mask_url(db_url)},
        "environment": "serverless" if IS_SERVERLESS else "local",
    }
