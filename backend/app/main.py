"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import auth, ideator, metrics, reports, sessions, users, websocket
from backend.app.core.config import settings
from backend.app.core.exception_handlers import register_exception_handlers
from backend.app.db.base import Base, engine
# Import all models to register them with SQLAlchemy
from backend.app.models import AgentLog, IdeationSession, Report, User  # noqa: F401
from backend.app.services.metrics import MetricsCollector

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.metrics = MetricsCollector(
        max_samples=settings.max_metric_samples,
        p95_threshold_ms=settings.report_p95_threshold_ms,
        p99_threshold_ms=settings.report_p99_threshold_ms,
    )
    logger.info("[STARTUP] Database ready, metrics collector created")

    yield

    # Shutdown: Close database connections
    logger.info(f"[SHUTDOWN] {app.state.metrics.detailed_report()}")
    await engine.dispose()
    logger.info("[SHUTDOWN] Cleaned up resources")


app = FastAPI(
    title="Ideation Agent API",
    description="Multi-agent business ideation pipeline with real-time progress",
    version="1.0.0",
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(sessions.router, prefix="/api")
app.include_router(ideator.router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(metrics.router, prefix="/api")
app.include_router(websocket.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Ideation Agent API",
        "version": "1.0.0",
        "description": "Multi-agent business ideation pipeline with real-time progress",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
