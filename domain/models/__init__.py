"""
Domain models for the workout structure editor.

This package contains pure domain models that are independent of
infrastructure concerns (HTTP, files, external services).

These models represent the workout document tree:
- Workout: The root holding an ordered list of blocks
- Block: A two-lane container (its own exercises plus supersets)
- Superset: Exercises performed back-to-back with one shared rest
- Exercise: A single exercise prescription (leaf)
- ExerciseLocation: Address of an exercise or insertion point
- EditorDefaults: Values used for nodes the editor creates

Usage:
    >>> from domain.models import Workout, Block, Superset, Exercise

    >>> workout = Workout(
    ...     title="Upper Body",
    ...     blocks=[
    ...         Block(
    ...             label="Block 1",
    ...             exercises=[Exercise(name="Bench Press", sets=4, reps=8)],
    ...             supersets=[
    ...                 Superset(
    ...                     rest_between_sec=60,
    ...                     exercises=[
    ...                         Exercise(name="Curl", reps=12),
    ...                         Exercise(name="Pushdown", reps=12),
    ...                     ],
    ...                 )
    ...             ],
    ...         )
    ...     ],
    ... )

    >>> # Serialize to JSON
    >>> json_str = workout.model_dump_json(indent=2)

    >>> # Deserialize from JSON
    >>> workout = Workout.model_validate_json(json_str)
"""

from domain.models.exercise import Exercise, RestType
from domain.models.superset import Superset
from domain.models.block import (
    Block,
    BlockStructure,
    get_structure_display_name,
)
from domain.models.workout import Workout
from domain.models.location import ExerciseLocation
from domain.models.defaults import EditorDefaults

__all__ = [
    # Main entities
    "Workout",
    "Block",
    "Superset",
    "Exercise",
    # Addressing and configuration
    "ExerciseLocation",
    "EditorDefaults",
    # Enums
    "BlockStructure",
    "RestType",
    # Helpers
    "get_structure_display_name",
]
