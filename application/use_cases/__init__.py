"""
Application Use Cases for the workout structure editor.

This package contains application-level use cases that orchestrate domain
logic. Use cases are the entry points for business operations and contain
the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and services
- Dependencies are injected via constructors for testability
- Use cases return domain models, not API responses

Usage:
    from application.use_cases import EditWorkoutUseCase, EditWorkoutResult

    use_case = EditWorkoutUseCase(allocator=IdAllocator())
    result = use_case.execute(workout=workout, operations=operations)
"""

from application.use_cases.edit_workout import EditWorkoutResult, EditWorkoutUseCase

__all__ = [
    "EditWorkoutUseCase",
    "EditWorkoutResult",
]
