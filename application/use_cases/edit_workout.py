"""
EditWorkout Use Case.

Applies a batch of structural edit operations to a workout document.

Workflow:
1. Normalize the incoming workout (fill in missing identifiers)
2. Apply edit operations in order; any structural error aborts the batch
3. Re-check the identity invariants on the result
4. Return EditWorkoutResult

The batch is all-or-nothing: since every operation returns a new document
and never touches its input, an aborted batch simply discards the partial
result and the caller's document is unaffected.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from domain.exceptions import WorkoutEditError
from domain.models import EditorDefaults, Workout
from domain.models.defaults import DEFAULT_EDITOR_DEFAULTS
from domain.models.edit_operation import (
    AddBlockOperation,
    AddExerciseOperation,
    AddSupersetOperation,
    ApplyBlockRestOperation,
    DeleteBlockOperation,
    DeleteExerciseOperation,
    DeleteSupersetOperation,
    EditOperation,
    MoveBlockOperation,
    MoveExerciseOperation,
    UpdateBlockOperation,
    UpdateExerciseOperation,
    UpdateSupersetOperation,
    UpdateTitleOperation,
)
from domain.services import mutations
from domain.services.id_allocator import IdAllocator
from domain.services.invariants import find_invariant_violations
from domain.services.normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class EditWorkoutResult:
    """Result of the EditWorkout use case execution."""

    success: bool
    workout: Optional[Workout] = None
    changes_applied: int = 0
    error: Optional[str] = None
    failed_operation: Optional[int] = None
    validation_errors: List[str] = field(default_factory=list)


class EditWorkoutUseCase:
    """
    Use case for applying edit operations to a workout.

    Orchestrates the following workflow:
    1. Normalize the workout
    2. Apply operations in order (all or nothing)
    3. Check invariants on the result
    4. Return result

    Dependencies are injected via constructor for testability.

    Usage:
        >>> use_case = EditWorkoutUseCase(allocator=IdAllocator())
        >>> result = use_case.execute(
        ...     workout=workout,
        ...     operations=[
        ...         MoveBlockOperation(source_index=0, target_index=2),
        ...         AddExerciseOperation(block_index=0, name="Push Up"),
        ...     ],
        ... )
        >>> if result.success:
        ...     print(f"Applied {result.changes_applied} changes")
    """

    def __init__(
        self,
        allocator: IdAllocator,
        defaults: EditorDefaults = DEFAULT_EDITOR_DEFAULTS,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            allocator: Source of identifiers for created nodes
            defaults: Values for created exercises and supersets
        """
        self._allocator = allocator
        self._defaults = defaults

    def execute(
        self,
        workout: Workout,
        operations: Sequence[EditOperation],
    ) -> EditWorkoutResult:
        """
        Execute the edit workflow.

        Args:
            workout: Current workout (normalized or not)
            operations: Operations to apply, in order

        Returns:
            EditWorkoutResult with success status and the new workout
        """
        current = normalize(workout, self._allocator)

        changes_applied = 0
        for i, op in enumerate(operations):
            try:
                updated = self.apply_operation(current, op)
            except (WorkoutEditError, ValueError) as e:
                logger.warning(f"Edit operation {i} ({op.op}) rejected: {e}")
                return EditWorkoutResult(
                    success=False,
                    error=f"Operation {i} ({op.op}) failed: {e}",
                    failed_operation=i,
                    validation_errors=[str(e)],
                )

            if updated is current:
                logger.debug(f"Operation {op.op} did not result in change (no-op)")
            else:
                changes_applied += 1
            current = updated

        violations = find_invariant_violations(current)
        if violations:
            logger.warning(f"Edited workout violates invariants: {violations}")
            return EditWorkoutResult(
                success=False,
                error="Workout invariants violated after applying edits",
                validation_errors=violations,
            )

        logger.info(
            f"Applied {changes_applied} of {len(operations)} edit operations "
            f"to workout '{current.title}'"
        )
        return EditWorkoutResult(
            success=True,
            workout=current,
            changes_applied=changes_applied,
        )

    def apply_operation(self, workout: Workout, op: EditOperation) -> Workout:
        """
        Apply a single edit operation.

        Raises:
            StructuralIndexError: If the operation addresses a missing location
            ValueError: If the operation type is unknown
        """
        allocator = self._allocator
        defaults = self._defaults

        if isinstance(op, MoveBlockOperation):
            return mutations.move_block(workout, op.source_index, op.target_index)
        if isinstance(op, MoveExerciseOperation):
            return mutations.move_exercise(workout, op.source, op.target, allocator, defaults)
        if isinstance(op, AddExerciseOperation):
            return mutations.add_exercise(
                workout, op.block_index, op.name, allocator, op.superset_index, defaults
            )
        if isinstance(op, DeleteExerciseOperation):
            return mutations.delete_exercise(
                workout, op.block_index, op.exercise_index, op.superset_index
            )
        if isinstance(op, UpdateExerciseOperation):
            return mutations.update_exercise(
                workout, op.block_index, op.exercise_index, op.fields, op.superset_index
            )
        if isinstance(op, AddSupersetOperation):
            return mutations.add_superset(workout, op.block_index, allocator, defaults)
        if isinstance(op, DeleteSupersetOperation):
            return mutations.delete_superset(workout, op.block_index, op.superset_index)
        if isinstance(op, UpdateSupersetOperation):
            return mutations.update_superset(
                workout, op.block_index, op.superset_index, op.fields
            )
        if isinstance(op, AddBlockOperation):
            return mutations.add_block(workout, allocator)
        if isinstance(op, DeleteBlockOperation):
            return mutations.delete_block(workout, op.block_index)
        if isinstance(op, UpdateBlockOperation):
            return mutations.update_block(workout, op.block_index, op.fields)
        if isinstance(op, ApplyBlockRestOperation):
            return mutations.apply_block_rest(
                workout, op.block_index, op.label, op.rest_type, op.rest_sec
            )
        if isinstance(op, UpdateTitleOperation):
            return mutations.update_title(workout, op.title)

        raise ValueError(f"Unsupported edit operation: {op!r}")
