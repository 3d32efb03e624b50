"""
Modreview FastAPI application.

API Structure (v1):
- /v1/health - Service health
- /v1/items/* - Content items, analysis, flags and reviewer decisions
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modreview.api.routes import router, shutdown_controller
from modreview.core.config import settings
from modreview.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger("main")


def init_database():
    """Initialize database tables and seed demo items.

    Non-blocking: logs error and continues if database unavailable.
    Set SKIP_DB_INIT=true to skip entirely.
    """
    if os.getenv("SKIP_DB_INIT", "false").lower() == "true":
        logger.info("SKIP_DB_INIT=true - skipping database initialization")
        return

    try:
        from modreview.db.connection import init_db, get_db_session
        from modreview.db.seeds import run_all_seeds

        logger.info("Initializing database...")
        init_db()
        logger.info("✓ Database tables created")

        logger.info("Seeding database...")
        with get_db_session() as session:
            run_all_seeds(session)
        logger.info("✓ Database seeded")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        logger.warning("Database features may not work correctly")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    logger.info("Starting Modreview service")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"Store backend: {settings.store_backend}")
    logger.info(f"Providers: {', '.join(settings.enabled_providers)}")

    init_database()

    yield

    # Shutdown
    logger.info("Shutting down Modreview service")
    await shutdown_controller()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Multi-provider content moderation review service",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)  # /v1/health, /v1/items/*


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.version,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
