"""FastAPI application factory for the hedging engine HTTP service."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from fxhedge.config import AppSettings
from fxhedge.service import routes


def create_app(settings: AppSettings | None = None, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings stored on app.state for the routes.
            Defaults to AppSettings().
        lifespan: Optional async context manager for lifespan events.

    Returns:
        Configured FastAPI application with the /api routes.
    """
    app = FastAPI(
        title="FX Hedging Engine",
        lifespan=lifespan,
    )
    app.state.settings = settings if settings is not None else AppSettings()

    app.include_router(routes.router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app
