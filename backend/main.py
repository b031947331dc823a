"""
FastAPI application factory for the workout structure editor.

The editor API is stateless: clients post the document they hold and get
the edited document back. create_app() wires settings, Sentry, CORS and the
routers; tests build their own app with explicit settings.

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    app = create_app()  # settings from the environment

    test_app = create_app(settings=Settings(environment="test", _env_file=None))

Run locally:
    uvicorn backend.main:app --reload
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import get_settings as settings_dependency
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOCAL_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a configured editor API.

    Args:
        settings: Settings to run with. Defaults to get_settings(), i.e. the
                  environment and .env file.

    Returns:
        FastAPI application with the health and workout routers mounted.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    app = FastAPI(
        title="Workout Structure Editor API",
        description="Normalization and structural editing of workout documents",
        version="1.0.0",
        # Interactive docs stay off in production
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    # Every router and use case provider reads settings through this dependency
    app.dependency_overrides[settings_dependency] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=LOCAL_ORIGINS + settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _include_routers(app)

    logger.info(
        f"Workout editor API created (environment: {settings.environment}, "
        f"id prefix: {settings.id_prefix or '(none)'})"
    )
    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1,
    )
    logger.info("Sentry initialized for workout editor API")


def _include_routers(app: FastAPI) -> None:
    from api.routers import health_router, workouts_router

    # /health at root; /workouts prefix is defined in the router
    app.include_router(health_router)
    app.include_router(workouts_router)


# Default app instance for uvicorn
app = create_app()
