"""FastAPI application for the lifestyle-tracker API."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ..config import Settings
from ..context import TrackerContext
from ..db.engine import init_db
from ..errors import TrackerError, ValidationError
from .routers import favorites, sessions, week


def create_app(settings: Settings | None = None, db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the database and follow the favorites collection."""
        tracker = TrackerContext.create(settings, db_path)
        await init_db(tracker.db_path)
        await tracker.favorites_sync.start()
        app.state.tracker = tracker
        logger.info("Serving account {} from {}", tracker.settings.account_id, tracker.db_path)
        yield
        tracker.favorites_sync.stop()

    app = FastAPI(
        title="lifestyle-tracker",
        description="Weekly workout checkboxes backed by a session log",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(week.router)
    app.include_router(sessions.router)
    app.include_router(favorites.router)

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"error": str(exc)})

    @app.exception_handler(TrackerError)
    async def tracker_error(request: Request, exc: TrackerError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
