"""
Domain converters between external payloads and the Workout model.

- workout_from_payload: upstream nested dict (ingestion/import) -> Workout
- workout_to_payload: Workout -> nested dict for export/mapping services

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import workout_from_payload, workout_to_payload

    >>> workout = workout_from_payload({"title": "Test", "blocks": [...]})
    >>> data = workout_to_payload(workout)
"""

from domain.converters.payload import workout_from_payload, workout_to_payload

__all__ = [
    "workout_from_payload",
    "workout_to_payload",
]
