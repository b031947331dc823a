"""
Router package for the workout structure editor API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- workouts: Normalization and structural editing of workout documents
"""

from api.routers.health import router as health_router
from api.routers.workouts import router as workouts_router

__all__ = [
    "health_router",
    "workouts_router",
]
