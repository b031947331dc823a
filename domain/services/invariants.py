"""
Read-only inspection of a workout tree.

Used by the application layer to verify a document after a batch of
edits, and by callers that address nodes by identifier alone.
"""

from collections import Counter
from typing import Iterator, List, Optional, Tuple

from domain.models import ExerciseLocation, Exercise, Workout


def iter_exercises(workout: Workout) -> Iterator[Tuple[ExerciseLocation, Exercise]]:
    """
    Yield every exercise with its location, in document order.

    Within a block the block-level lane comes first, then each superset.
    """
    for block_index, block in enumerate(workout.blocks):
        for exercise_index, exercise in enumerate(block.exercises):
            yield ExerciseLocation(
                block_index=block_index, exercise_index=exercise_index
            ), exercise
        for superset_index, superset in enumerate(block.supersets):
            for exercise_index, exercise in enumerate(superset.exercises):
                yield ExerciseLocation(
                    block_index=block_index,
                    exercise_index=exercise_index,
                    superset_index=superset_index,
                ), exercise


def collect_ids(workout: Workout) -> List[Optional[str]]:
    """
    List the identifiers of every block, superset, and exercise.

    Missing identifiers are included as None so callers can count them.
    """
    ids: List[Optional[str]] = []
    for block in workout.blocks:
        ids.append(block.id)
        ids.extend(ex.id for ex in block.exercises)
        for superset in block.supersets:
            ids.append(superset.id)
            ids.extend(ex.id for ex in superset.exercises)
    return ids


def count_exercises(workout: Workout) -> int:
    """Count exercises across every lane of every block."""
    return workout.total_exercises


def find_duplicate_ids(workout: Workout) -> List[str]:
    """Return identifiers that appear more than once, in sorted order."""
    counts = Counter(node_id for node_id in collect_ids(workout) if node_id)
    return sorted(node_id for node_id, n in counts.items() if n > 1)


def find_invariant_violations(workout: Workout) -> List[str]:
    """
    Check the identity invariants of a workout.

    Returns:
        Human-readable descriptions of every violation; empty when the
        document is sound.
    """
    errors: List[str] = []

    for block_index, block in enumerate(workout.blocks):
        if not block.id:
            errors.append(f"Block {block_index} has no id")
        for exercise_index, exercise in enumerate(block.exercises):
            if not exercise.id:
                errors.append(f"Block {block_index} exercise {exercise_index} has no id")
        for superset_index, superset in enumerate(block.supersets):
            if not superset.id:
                errors.append(f"Block {block_index} superset {superset_index} has no id")
            for exercise_index, exercise in enumerate(superset.exercises):
                if not exercise.id:
                    errors.append(
                        f"Block {block_index} superset {superset_index} "
                        f"exercise {exercise_index} has no id"
                    )

    for node_id in find_duplicate_ids(workout):
        errors.append(f"Duplicate id: {node_id}")

    return errors


def locate_exercise(workout: Workout, exercise_id: str) -> Optional[ExerciseLocation]:
    """
    Find where an exercise currently lives.

    Args:
        workout: Workout to search
        exercise_id: Identifier of the exercise

    Returns:
        Location of the exercise, or None if no exercise has that id
    """
    for location, exercise in iter_exercises(workout):
        if exercise.id == exercise_id:
            return location
    return None
