"""
Mutation engine for the workout structure editor.

Every function here is a pure transition: it takes the current Workout
plus the operation's arguments and returns a new Workout. The input is
never modified; untouched blocks, supersets, and exercises are shared
between the old and new documents, so earlier references stay valid
snapshots.

Failure semantics:
- Operations that need a location to exist (moves, updates, inserts)
  raise StructuralIndexError when it does not.
- Delete-style operations treat a missing target as a no-op and return
  the input unchanged, since duplicate delete requests are expected.

Indices are never negative: Python's wrap-around indexing would otherwise
turn a stale caller index into an edit of the wrong node.
"""

import logging
from typing import Any, Dict, List, Optional

from domain.exceptions import StructuralIndexError
from domain.models import (
    Block,
    EditorDefaults,
    Exercise,
    ExerciseLocation,
    RestType,
    Superset,
    Workout,
)
from domain.models.defaults import DEFAULT_EDITOR_DEFAULTS
from domain.services.id_allocator import IdAllocator

logger = logging.getLogger(__name__)


# Fields that structural operations own; shallow-merge updates never touch them.
PROTECTED_BLOCK_FIELDS = frozenset(["id", "exercises", "supersets"])
PROTECTED_SUPERSET_FIELDS = frozenset(["id", "exercises"])
PROTECTED_EXERCISE_FIELDS = frozenset(["id"])

MAX_REST_SEC = 600


# =============================================================================
# Lane Helpers
# =============================================================================


def _check_index(kind: str, index: int, size: int, context: str) -> None:
    """Raise StructuralIndexError unless 0 <= index < size."""
    if index < 0 or index >= size:
        raise StructuralIndexError(kind, index, size, context)


def _check_position(index: int, size: int, context: str) -> None:
    """Raise StructuralIndexError unless index is a valid insertion point."""
    if index < 0 or index > size:
        raise StructuralIndexError("position", index, size, context)


def _has_index(index: Optional[int], size: int) -> bool:
    return index is not None and 0 <= index < size


def _get_block(workout: Workout, block_index: int, context: str) -> Block:
    _check_index("block", block_index, len(workout.blocks), context)
    return workout.blocks[block_index]


def _get_lane(block: Block, superset_index: Optional[int], context: str) -> List[Exercise]:
    """Return the block-level lane or the named superset's lane."""
    if superset_index is None:
        return block.exercises
    _check_index("superset", superset_index, len(block.supersets), context)
    return block.supersets[superset_index].exercises


def _with_lane(
    block: Block, superset_index: Optional[int], exercises: List[Exercise]
) -> Block:
    """Return a copy of the block with one lane replaced."""
    if superset_index is None:
        return block.model_copy(update={"exercises": exercises})

    supersets = list(block.supersets)
    supersets[superset_index] = supersets[superset_index].model_copy(
        update={"exercises": exercises}
    )
    return block.model_copy(update={"supersets": supersets})


def _with_block(workout: Workout, block_index: int, block: Block) -> Workout:
    blocks = list(workout.blocks)
    blocks[block_index] = block
    return workout.with_blocks(blocks)


def _new_superset(allocator: IdAllocator, defaults: EditorDefaults) -> Superset:
    return Superset(
        id=allocator.allocate(),
        exercises=[],
        rest_between_sec=defaults.superset_rest_between_sec,
    )


def _materialize_superset(
    block: Block,
    superset_index: int,
    allocator: IdAllocator,
    defaults: EditorDefaults,
    context: str,
) -> Block:
    """
    Make sure the block has a superset at ``superset_index``.

    Only the next free position can be created; anything further out would
    leave a gap in the superset list.
    """
    size = len(block.supersets)
    if 0 <= superset_index < size:
        return block
    if superset_index != size:
        raise StructuralIndexError("superset", superset_index, size, context)

    superset = _new_superset(allocator, defaults)
    logger.debug(f"Materialized superset {superset.id} at index {superset_index}")
    return block.model_copy(update={"supersets": [*block.supersets, superset]})


def _merge_fields(protected: frozenset, fields: Dict[str, Any]) -> Dict[str, Any]:
    ignored = protected.intersection(fields)
    if ignored:
        logger.debug(f"Ignoring protected fields in update: {sorted(ignored)}")
    return {k: v for k, v in fields.items() if k not in protected}


# =============================================================================
# Reordering
# =============================================================================


def same_lane_target_index(source_index: int, drop_index: int) -> int:
    """
    Translate a drop position into a post-removal insertion index.

    Drop positions are measured against the list before the dragged item is
    removed. When the item moves down, removing it shifts everything after
    it up by one, so the insertion index is one less.

    Args:
        source_index: Current index of the item being moved
        drop_index: Position it was dropped at (0..len, pre-removal)

    Returns:
        Index to insert at after the item has been removed
    """
    return drop_index - 1 if source_index < drop_index else drop_index


def move_block(workout: Workout, source_index: int, target_index: int) -> Workout:
    """
    Move the block at ``source_index`` to the drop position ``target_index``.

    ``target_index`` is measured against the list before removal and may
    equal the block count (drop at the end). Moving down lands the block at
    ``target_index - 1``; moving up lands it at ``target_index``.

    Raises:
        StructuralIndexError: If either index is out of range
    """
    size = len(workout.blocks)
    _check_index("block", source_index, size, "move_block source")
    _check_position(target_index, size, "move_block target")

    if source_index == target_index:
        return workout

    blocks = list(workout.blocks)
    moved = blocks.pop(source_index)
    blocks.insert(same_lane_target_index(source_index, target_index), moved)
    return workout.with_blocks(blocks)


def move_exercise(
    workout: Workout,
    source: ExerciseLocation,
    target: ExerciseLocation,
    allocator: IdAllocator,
    defaults: EditorDefaults = DEFAULT_EDITOR_DEFAULTS,
) -> Workout:
    """
    Move an exercise from one lane position to another.

    1. The exercise is removed from the source lane.
    2. If ``target.superset_index`` names the next free superset slot of the
       target block, an empty superset is created there first.
    3. The exercise is inserted at ``target.exercise_index`` of the target
       lane. No index adjustment is made: for a move within one lane the
       caller passes the post-removal index (see same_lane_target_index).

    Moving an exercise onto its own location returns the workout as-is.

    Args:
        workout: Current workout
        source: Live location of the exercise to move
        target: Insertion point in the target lane
        allocator: Used only when a superset has to be materialized
        defaults: Values for a materialized superset

    Returns:
        New workout with the exercise moved

    Raises:
        StructuralIndexError: If the source does not exist, or the target
            block, superset slot, or insertion point is invalid
    """
    source_block = _get_block(workout, source.block_index, "move_exercise source")
    source_lane = _get_lane(source_block, source.superset_index, "move_exercise source")
    _check_index("exercise", source.exercise_index, len(source_lane), "move_exercise source")

    if source.same_lane(target) and source.exercise_index == target.exercise_index:
        return workout

    _check_index("block", target.block_index, len(workout.blocks), "move_exercise target")

    # Step 1: removal
    remaining = list(source_lane)
    moved = remaining.pop(source.exercise_index)
    blocks = list(workout.blocks)
    blocks[source.block_index] = _with_lane(source_block, source.superset_index, remaining)

    # Step 2: target lane resolution (reads the post-removal block)
    target_block = blocks[target.block_index]
    if target.superset_index is not None:
        target_block = _materialize_superset(
            target_block, target.superset_index, allocator, defaults, "move_exercise target"
        )
    target_lane = _get_lane(target_block, target.superset_index, "move_exercise target")

    # Step 3: insertion
    _check_position(target.exercise_index, len(target_lane), "move_exercise target")
    inserted = list(target_lane)
    inserted.insert(target.exercise_index, moved)
    blocks[target.block_index] = _with_lane(target_block, target.superset_index, inserted)

    logger.debug(f"Moved exercise {moved.id} from {source} to {target}")
    return workout.with_blocks(blocks)


# =============================================================================
# Exercises
# =============================================================================


def new_exercise(
    name: str,
    allocator: IdAllocator,
    defaults: EditorDefaults = DEFAULT_EDITOR_DEFAULTS,
) -> Exercise:
    """Build an exercise with the editor's default prescription."""
    return Exercise(
        id=allocator.allocate(),
        name=name,
        sets=defaults.exercise_sets,
        reps=defaults.exercise_reps,
        reps_range=None,
        duration_sec=None,
        rest_sec=defaults.exercise_rest_sec,
        distance_m=None,
        distance_range=None,
        type=defaults.exercise_type,
        notes=None,
    )


def add_exercise(
    workout: Workout,
    block_index: int,
    name: str,
    allocator: IdAllocator,
    superset_index: Optional[int] = None,
    defaults: EditorDefaults = DEFAULT_EDITOR_DEFAULTS,
) -> Workout:
    """
    Append a new exercise to a block lane or superset lane.

    The name is not validated. When ``superset_index`` is the next free
    superset slot, the superset is created first.

    Raises:
        StructuralIndexError: If the block does not exist or the superset
            index is past the next free slot
    """
    block = _get_block(workout, block_index, "add_exercise")
    if superset_index is not None:
        block = _materialize_superset(block, superset_index, allocator, defaults, "add_exercise")

    lane = _get_lane(block, superset_index, "add_exercise")
    exercise = new_exercise(name, allocator, defaults)
    return _with_block(workout, block_index, _with_lane(block, superset_index, [*lane, exercise]))


def delete_exercise(
    workout: Workout,
    block_index: int,
    exercise_index: int,
    superset_index: Optional[int] = None,
) -> Workout:
    """
    Remove the exercise at a lane position.

    A missing block, superset, or exercise is a no-op and returns the
    workout unchanged.
    """
    if not _has_index(block_index, len(workout.blocks)):
        logger.debug(f"delete_exercise: no block at {block_index}")
        return workout
    block = workout.blocks[block_index]

    if superset_index is not None and not _has_index(superset_index, len(block.supersets)):
        logger.debug(f"delete_exercise: no superset at {block_index}/{superset_index}")
        return workout

    lane = block.exercises if superset_index is None else block.supersets[superset_index].exercises
    if not _has_index(exercise_index, len(lane)):
        logger.debug(f"delete_exercise: no exercise at {exercise_index}")
        return workout

    remaining = [ex for i, ex in enumerate(lane) if i != exercise_index]
    return _with_block(workout, block_index, _with_lane(block, superset_index, remaining))


def update_exercise(
    workout: Workout,
    block_index: int,
    exercise_index: int,
    fields: Dict[str, Any],
    superset_index: Optional[int] = None,
) -> Workout:
    """
    Shallow-merge ``fields`` onto an exercise.

    The identifier and any field not named in ``fields`` are left as they
    are. Values go through model validation, so e.g. ``rest_type="button"``
    becomes RestType.BUTTON.

    Raises:
        StructuralIndexError: If the exercise does not exist
        pydantic.ValidationError: If a value has the wrong type
    """
    block = _get_block(workout, block_index, "update_exercise")
    lane = _get_lane(block, superset_index, "update_exercise")
    _check_index("exercise", exercise_index, len(lane), "update_exercise")

    updates = _merge_fields(PROTECTED_EXERCISE_FIELDS, fields)
    current = lane[exercise_index]
    updated = Exercise.model_validate({**current.model_dump(), **updates})

    new_lane = list(lane)
    new_lane[exercise_index] = updated
    return _with_block(workout, block_index, _with_lane(block, superset_index, new_lane))


# =============================================================================
# Supersets
# =============================================================================


def add_superset(
    workout: Workout,
    block_index: int,
    allocator: IdAllocator,
    defaults: EditorDefaults = DEFAULT_EDITOR_DEFAULTS,
) -> Workout:
    """
    Append an empty superset to a block.

    Raises:
        StructuralIndexError: If the block does not exist
    """
    block = _get_block(workout, block_index, "add_superset")
    superset = _new_superset(allocator, defaults)
    updated = block.model_copy(update={"supersets": [*block.supersets, superset]})
    return _with_block(workout, block_index, updated)


def delete_superset(workout: Workout, block_index: int, superset_index: int) -> Workout:
    """
    Remove a superset (and the exercises in it) from a block.

    A missing block or superset is a no-op.
    """
    if not _has_index(block_index, len(workout.blocks)):
        logger.debug(f"delete_superset: no block at {block_index}")
        return workout
    block = workout.blocks[block_index]

    if not _has_index(superset_index, len(block.supersets)):
        logger.debug(f"delete_superset: no superset at {block_index}/{superset_index}")
        return workout

    supersets = [ss for i, ss in enumerate(block.supersets) if i != superset_index]
    return _with_block(workout, block_index, block.model_copy(update={"supersets": supersets}))


def update_superset(
    workout: Workout,
    block_index: int,
    superset_index: int,
    fields: Dict[str, Any],
) -> Workout:
    """
    Shallow-merge ``fields`` onto a superset (e.g. ``rest_between_sec``).

    Raises:
        StructuralIndexError: If the superset does not exist
    """
    block = _get_block(workout, block_index, "update_superset")
    _check_index("superset", superset_index, len(block.supersets), "update_superset")

    current = block.supersets[superset_index]
    updates = _merge_fields(PROTECTED_SUPERSET_FIELDS, fields)
    updated = Superset.model_validate(
        {
            **current.model_dump(exclude={"exercises"}),
            **updates,
            "exercises": current.exercises,
        }
    )

    supersets = list(block.supersets)
    supersets[superset_index] = updated
    return _with_block(workout, block_index, block.model_copy(update={"supersets": supersets}))


# =============================================================================
# Blocks
# =============================================================================


def add_block(workout: Workout, allocator: IdAllocator) -> Workout:
    """
    Append a new empty block labeled "Block N", N being the new block count.

    The label only depends on how many blocks exist, not on their labels.
    """
    block = Block(
        id=allocator.allocate(),
        label=f"Block {len(workout.blocks) + 1}",
        structure=None,
        exercises=[],
        supersets=[],
    )
    return workout.with_blocks([*workout.blocks, block])


def delete_block(workout: Workout, block_index: int) -> Workout:
    """Remove a block and everything in it. A missing block is a no-op."""
    if not _has_index(block_index, len(workout.blocks)):
        logger.debug(f"delete_block: no block at {block_index}")
        return workout
    return workout.with_blocks([b for i, b in enumerate(workout.blocks) if i != block_index])


def update_block(workout: Workout, block_index: int, fields: Dict[str, Any]) -> Workout:
    """
    Shallow-merge ``fields`` onto a block.

    The identifier and both lanes are owned by the structural operations
    and are never replaced through an update.

    Raises:
        StructuralIndexError: If the block does not exist
        pydantic.ValidationError: If a value has the wrong type
    """
    block = _get_block(workout, block_index, "update_block")
    updates = _merge_fields(PROTECTED_BLOCK_FIELDS, fields)
    updated = Block.model_validate(
        {
            **block.model_dump(exclude={"exercises", "supersets"}),
            **updates,
            "exercises": block.exercises,
            "supersets": block.supersets,
        }
    )
    return _with_block(workout, block_index, updated)


def apply_block_rest(
    workout: Workout,
    block_index: int,
    label: Optional[str] = None,
    rest_type: Optional[RestType] = None,
    rest_sec: Optional[int] = None,
) -> Workout:
    """
    Rename a block and apply one rest setting to every exercise in it.

    Covers the block lane and every superset lane. With lap-button rest the
    exercises' ``rest_sec`` is cleared; with timed rest it is clamped to
    0..MAX_REST_SEC. Arguments left as None are not changed.

    Raises:
        StructuralIndexError: If the block does not exist
    """
    block = _get_block(workout, block_index, "apply_block_rest")

    rest_updates: Dict[str, Any] = {}
    if rest_type is not None:
        rest_type = RestType(rest_type)
        rest_updates["rest_type"] = rest_type
    if rest_type == RestType.BUTTON:
        rest_updates["rest_sec"] = None
    elif rest_sec is not None:
        rest_updates["rest_sec"] = max(0, min(MAX_REST_SEC, rest_sec))

    block_updates: Dict[str, Any] = {}
    if label is not None:
        block_updates["label"] = label
    if rest_type is not None:
        block_updates["rest_type"] = rest_type

    if rest_updates:
        block_updates["exercises"] = [
            ex.model_copy(update=rest_updates) for ex in block.exercises
        ]
        block_updates["supersets"] = [
            ss.model_copy(
                update={"exercises": [ex.model_copy(update=rest_updates) for ex in ss.exercises]}
            )
            for ss in block.supersets
        ]

    if not block_updates:
        return workout
    return _with_block(workout, block_index, block.model_copy(update=block_updates))


# =============================================================================
# Workout
# =============================================================================


def update_title(workout: Workout, title: str) -> Workout:
    """Return a new workout with the title replaced."""
    if title == workout.title:
        return workout
    return workout.with_title(title)
