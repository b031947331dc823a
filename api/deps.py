"""
FastAPI Dependency Providers for the workout structure editor API.

This module provides FastAPI dependency injection functions for settings,
the identity allocator, and use cases, so tests can swap any of them.

Architecture:
- Settings and the IdAllocator are cached per-process (lru_cache)
- Use case providers create new instances per-request

Usage in routers:
    from api.deps import get_edit_workout_use_case
    from application.use_cases import EditWorkoutUseCase

    @router.post("/workouts/edit")
    def edit(
        request: EditWorkoutRequest,
        use_case: EditWorkoutUseCase = Depends(get_edit_workout_use_case),
    ):
        return use_case.execute(request.workout, request.operations)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_id_allocator] = lambda: IdAllocator(prefix="t-")
"""

from functools import lru_cache

from fastapi import Depends

from application.use_cases import EditWorkoutUseCase
from backend.settings import Settings, get_settings as _get_settings
from domain.services.id_allocator import IdAllocator


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Identity Allocator Provider
# =============================================================================


@lru_cache
def get_id_allocator() -> IdAllocator:
    """
    Get the process-wide IdAllocator (cached).

    Note: settings are read directly rather than through Depends() so
    that lru_cache sees a call without arguments.

    Returns:
        IdAllocator: Allocator using the configured id prefix
    """
    settings = _get_settings()
    return IdAllocator(prefix=settings.id_prefix)


# =============================================================================
# Use Case Providers
# =============================================================================


def get_edit_workout_use_case(
    allocator: IdAllocator = Depends(get_id_allocator),
    settings: Settings = Depends(get_settings),
) -> EditWorkoutUseCase:
    """
    Get an EditWorkoutUseCase wired with the allocator and editor defaults.

    Returns:
        EditWorkoutUseCase: New use case instance for this request
    """
    return EditWorkoutUseCase(allocator=allocator, defaults=settings.editor_defaults)
