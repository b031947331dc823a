"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_settings
from backend.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint for the editor API.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}


@router.get("/health/config")
def health_config(settings: Settings = Depends(get_settings)):
    """
    Report the active environment and editor defaults.

    Returns:
        dict: Environment name and the defaults applied to new nodes
    """
    return {
        "environment": settings.environment,
        "editor_defaults": settings.editor_defaults.model_dump(),
    }
