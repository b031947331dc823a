"""
Domain layer for the workout structure editor.

This package contains the workout document models and the pure services
that operate on them (identity allocation, normalization, mutation).
It is independent of infrastructure concerns (HTTP, files, settings).
"""

from domain.models import (
    Block,
    BlockStructure,
    EditorDefaults,
    Exercise,
    ExerciseLocation,
    RestType,
    Superset,
    Workout,
)
from domain.exceptions import StructuralIndexError, WorkoutEditError

__all__ = [
    "Block",
    "BlockStructure",
    "EditorDefaults",
    "Exercise",
    "ExerciseLocation",
    "RestType",
    "Superset",
    "Workout",
    "StructuralIndexError",
    "WorkoutEditError",
]
