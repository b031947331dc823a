"""
Workouts router for structural editing of workout documents.

This router contains endpoints for:
- /workouts/normalize - Fill in missing identifiers
- /workouts/edit - Apply a batch of edit operations
- /workouts/summary - Counts and identifier check for a workout

The endpoints are stateless: the caller sends the current document and
gets the new one back. Nothing is stored server-side.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.deps import get_edit_workout_use_case, get_id_allocator
from application.use_cases import EditWorkoutUseCase
from domain.converters import workout_from_payload, workout_to_payload
from domain.models.edit_operation import EditOperation
from domain.services.id_allocator import IdAllocator
from domain.services.invariants import find_invariant_violations
from domain.services.normalizer import normalize

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workouts",
    tags=["Workouts"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class NormalizeWorkoutRequest(BaseModel):
    """Request for normalizing a workout payload."""
    workout: Dict[str, Any]


class EditWorkoutRequest(BaseModel):
    """Request for applying edit operations to a workout."""
    workout: Dict[str, Any]
    operations: List[EditOperation] = Field(..., min_length=1)


class WorkoutResponse(BaseModel):
    """Response carrying a workout payload."""
    success: bool = True
    workout: Dict[str, Any]
    changes_applied: Optional[int] = None


class WorkoutSummaryResponse(BaseModel):
    """Counts and identity check for a workout."""
    title: str
    block_count: int
    superset_count: int
    exercise_count: int
    violations: List[str] = []


# =============================================================================
# Helper Functions
# =============================================================================


def _parse_workout(data: Dict[str, Any]):
    """Convert a payload into a Workout, mapping coercion errors to 422."""
    try:
        return workout_from_payload(data)
    except ValueError as e:
        logger.warning(f"Rejected workout payload: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid workout: {e}")


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/normalize", response_model=WorkoutResponse)
def normalize_workout(
    request: NormalizeWorkoutRequest,
    allocator: IdAllocator = Depends(get_id_allocator),
):
    """
    Fill in missing identifiers on every block, superset, and exercise.

    Every other field is returned unchanged.
    """
    workout = _parse_workout(request.workout)
    normalized = normalize(workout, allocator)
    return WorkoutResponse(workout=workout_to_payload(normalized))


@router.post("/edit", response_model=WorkoutResponse)
def edit_workout(
    request: EditWorkoutRequest,
    use_case: EditWorkoutUseCase = Depends(get_edit_workout_use_case),
):
    """
    Apply edit operations in order and return the new workout.

    The batch is all-or-nothing. A structural error (an index that does not
    exist in the sent document) returns 409 with the failing operation.
    """
    workout = _parse_workout(request.workout)
    result = use_case.execute(workout=workout, operations=request.operations)

    if not result.success:
        raise HTTPException(
            status_code=409,
            detail={
                "error": result.error,
                "failed_operation": result.failed_operation,
                "validation_errors": result.validation_errors,
            },
        )

    return WorkoutResponse(
        workout=workout_to_payload(result.workout),
        changes_applied=result.changes_applied,
    )


@router.post("/summary", response_model=WorkoutSummaryResponse)
def summarize_workout(request: NormalizeWorkoutRequest):
    """Report counts and identifier problems without changing anything."""
    workout = _parse_workout(request.workout)
    return WorkoutSummaryResponse(
        title=workout.title,
        block_count=workout.block_count,
        superset_count=workout.total_supersets,
        exercise_count=workout.total_exercises,
        violations=find_invariant_violations(workout),
    )
