# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.v1.router import api_router
from src.config import Settings, settings
from src.database import create_db_engine, create_session_factory
from src.schemas.common import HealthResponse
from src.services.permission_preset_service import PermissionPresetManager
from src.services.preset_store import (
    InMemoryPresetStore,
    PresetStore,
    SqlAlchemyPresetStore,
)

logger = logging.getLogger(__name__)


def configure_logging(app_settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_preset_store(app_settings: Settings) -> PresetStore:
    """Pick the preset store backend from settings."""
    if app_settings.database_url:
        engine = create_db_engine(app_settings.database_url)
        return SqlAlchemyPresetStore(create_session_factory(engine))
    return InMemoryPresetStore()


def create_app(
    app_settings: Settings = settings,
    preset_manager: PermissionPresetManager | None = None,
) -> FastAPI:
    """Create the application.

    Args:
        app_settings: Settings to build the application from
        preset_manager: Manager to use instead of building one at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        if getattr(app.state, "preset_manager", None) is None:
            logger.info("Initializing permission preset manager...")
            app.state.preset_manager = PermissionPresetManager(
                store=build_preset_store(app_settings),
                log_checks=app_settings.log_permission_checks,
            )

        yield

        logger.info("Shutting down permission service...")

    app = FastAPI(
        title=app_settings.app_name,
        description="Role-based permissions for bar and club staff",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.preset_manager = preset_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    app.include_router(api_router, prefix="/api/v1")
    return app


configure_logging(settings)
app = create_app()
