"""FastAPI application factory.

API layer:
- Checks request structure, reads/writes DB through the domain modules
- Returns JSON payloads for the experiment client
- Errors leave the API as {"error": message} with no internal detail
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from clockread.api.routes import experiments, statistics
from clockread.config import Settings, load_settings
from clockread.db.session import Database

logger = logging.getLogger(__name__)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the {"error": message} envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject bodies that are not JSON or not shaped like a submission."""
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Runtime settings. Loaded from the environment if omitted.
        database: Store handle to use. Built from settings at startup if
            omitted. The application disposes whichever handle it holds
            at shutdown.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.database is None:
            app.state.database = Database.from_settings(settings)
        # SchemaInitError propagates and aborts startup
        app.state.database.ensure_schema()
        logger.info("Database ready; accepting requests")
        try:
            yield
        finally:
            app.state.database.dispose()

    app = FastAPI(
        title="Clock Reading API",
        description="Stores clock-reading experiments and serves aggregate statistics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # Add CORS middleware for the experiment client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Include routes
    app.include_router(experiments.router, prefix="/api")
    app.include_router(statistics.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    # Mount the experiment client last so API routes take precedence
    if settings.static_dir.exists():
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="static")

    return app


# Default app instance
app = create_app()
