"""
API package for the workout structure editor.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_id_allocator,
    get_edit_workout_use_case,
)

__all__ = [
    # Settings
    "get_settings",
    # Identity
    "get_id_allocator",
    # Use cases
    "get_edit_workout_use_case",
]
