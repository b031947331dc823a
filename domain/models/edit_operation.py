"""
Edit operation records for driving the mutation engine from data.

Each record corresponds to one mutation engine function. A list of them
can be sent over HTTP, read from a file by the CLI, or built by tests;
the EditWorkout use case applies them in order.

Examples:
    >>> op = MoveBlockOperation(source_index=0, target_index=2)

    >>> op = MoveExerciseOperation(
    ...     source=ExerciseLocation(block_index=0, exercise_index=1),
    ...     target=ExerciseLocation(block_index=0, exercise_index=0, superset_index=0),
    ... )

    >>> ops = EditOperationList.model_validate(
    ...     {"operations": [{"op": "add_block"}, {"op": "delete_superset",
    ...                      "block_index": 0, "superset_index": 1}]}
    ... )
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from domain.models.exercise import RestType
from domain.models.location import ExerciseLocation


class _Operation(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class MoveBlockOperation(_Operation):
    """Move a block to a drop position (pre-removal index)."""

    op: Literal["move_block"] = "move_block"
    source_index: int
    target_index: int


class MoveExerciseOperation(_Operation):
    """Move an exercise between (or within) lanes."""

    op: Literal["move_exercise"] = "move_exercise"
    source: ExerciseLocation
    target: ExerciseLocation


class AddExerciseOperation(_Operation):
    op: Literal["add_exercise"] = "add_exercise"
    block_index: int
    name: str
    superset_index: Optional[int] = None


class DeleteExerciseOperation(_Operation):
    op: Literal["delete_exercise"] = "delete_exercise"
    block_index: int
    exercise_index: int
    superset_index: Optional[int] = None


class UpdateExerciseOperation(_Operation):
    op: Literal["update_exercise"] = "update_exercise"
    block_index: int
    exercise_index: int
    fields: Dict[str, Any]
    superset_index: Optional[int] = None


class AddSupersetOperation(_Operation):
    op: Literal["add_superset"] = "add_superset"
    block_index: int


class DeleteSupersetOperation(_Operation):
    op: Literal["delete_superset"] = "delete_superset"
    block_index: int
    superset_index: int


class UpdateSupersetOperation(_Operation):
    op: Literal["update_superset"] = "update_superset"
    block_index: int
    superset_index: int
    fields: Dict[str, Any]


class AddBlockOperation(_Operation):
    op: Literal["add_block"] = "add_block"


class DeleteBlockOperation(_Operation):
    op: Literal["delete_block"] = "delete_block"
    block_index: int


class UpdateBlockOperation(_Operation):
    op: Literal["update_block"] = "update_block"
    block_index: int
    fields: Dict[str, Any]


class ApplyBlockRestOperation(_Operation):
    """Rename a block and apply one rest setting to all its exercises."""

    op: Literal["apply_block_rest"] = "apply_block_rest"
    block_index: int
    label: Optional[str] = None
    rest_type: Optional[RestType] = None
    rest_sec: Optional[int] = None


class UpdateTitleOperation(_Operation):
    op: Literal["update_title"] = "update_title"
    title: str


EditOperation = Annotated[
    Union[
        MoveBlockOperation,
        MoveExerciseOperation,
        AddExerciseOperation,
        DeleteExerciseOperation,
        UpdateExerciseOperation,
        AddSupersetOperation,
        DeleteSupersetOperation,
        UpdateSupersetOperation,
        AddBlockOperation,
        DeleteBlockOperation,
        UpdateBlockOperation,
        ApplyBlockRestOperation,
        UpdateTitleOperation,
    ],
    Field(discriminator="op"),
]


class EditOperationList(BaseModel):
    """
    A list of edit operations to apply atomically.

    All operations in the list succeed or fail together.
    Operations are applied in order.
    """

    operations: List[EditOperation] = Field(
        ...,
        min_length=1,
        description="List of edit operations to apply",
    )
