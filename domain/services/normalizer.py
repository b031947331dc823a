"""
Normalizer: make sure every node of a workout carries a unique identifier.

The normalizer is the gate every upstream document passes through before
the editor touches it. It only fills in identifiers; every other field,
including ones the domain model does not know about, is preserved.
"""

import logging
from typing import Any, Dict, Optional, Set

from domain.converters.payload import workout_from_payload
from domain.models import Exercise, Workout
from domain.services.id_allocator import IdAllocator

logger = logging.getLogger(__name__)


def _needs_id(node_id: Optional[str], seen: Set[str]) -> bool:
    """A node needs a new id if it has none or repeats an earlier one."""
    return not node_id or node_id in seen


def is_normalized(workout: Workout) -> bool:
    """
    Check whether every node has an identifier and no identifier repeats.

    Args:
        workout: Workout to scan

    Returns:
        True if normalize() would return the workout unchanged.
    """
    seen: Set[str] = set()

    def check(node_id: Optional[str]) -> bool:
        if _needs_id(node_id, seen):
            return False
        seen.add(node_id)
        return True

    for block in workout.blocks:
        if not check(block.id):
            return False
        for exercise in block.exercises:
            if not check(exercise.id):
                return False
        for superset in block.supersets:
            if not check(superset.id):
                return False
            for exercise in superset.exercises:
                if not check(exercise.id):
                    return False
    return True


def normalize(workout: Workout, allocator: IdAllocator) -> Workout:
    """
    Return an equivalent workout in which every node has a unique identifier.

    If the pre-scan finds nothing to fill in, the same object is returned so
    callers can detect a no-op by identity. Otherwise the whole tree is
    rebuilt; the input workout is never modified.

    Walk order is blocks, then each block's exercise lane, then each
    superset and its exercises. When an identifier repeats, the first
    occurrence keeps it and later ones get fresh identifiers.

    Args:
        workout: Workout of arbitrary completeness
        allocator: Source of fresh identifiers

    Returns:
        Normalized workout
    """
    if is_normalized(workout):
        return workout

    seen: Set[str] = set()
    filled = 0

    def resolve(node_id: Optional[str]) -> str:
        nonlocal filled
        if _needs_id(node_id, seen):
            node_id = allocator.allocate()
            filled += 1
        seen.add(node_id)
        return node_id

    def rebuild_exercise(exercise: Exercise) -> Exercise:
        return exercise.model_copy(update={"id": resolve(exercise.id)})

    blocks = []
    for block in workout.blocks:
        block_id = resolve(block.id)
        exercises = [rebuild_exercise(ex) for ex in block.exercises]
        supersets = []
        for superset in block.supersets:
            superset_id = resolve(superset.id)
            supersets.append(
                superset.model_copy(
                    update={
                        "id": superset_id,
                        "exercises": [rebuild_exercise(ex) for ex in superset.exercises],
                    }
                )
            )
        blocks.append(
            block.model_copy(
                update={"id": block_id, "exercises": exercises, "supersets": supersets}
            )
        )

    logger.debug(f"Normalized workout '{workout.title}': assigned {filled} identifiers")
    return workout.with_blocks(blocks)


def normalize_payload(data: Dict[str, Any], allocator: IdAllocator) -> Workout:
    """
    Validate a raw upstream payload and normalize it.

    Args:
        data: Nested dict shaped like a Workout (ids optional, lists may be null)
        allocator: Source of fresh identifiers

    Returns:
        Normalized Workout

    Raises:
        pydantic.ValidationError: If the payload cannot be coerced into a workout
    """
    return normalize(workout_from_payload(data), allocator)
