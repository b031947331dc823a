"""
Location records used to address an exercise inside a workout.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ExerciseLocation(BaseModel):
    """
    Position of an exercise (or an insertion point) in the workout tree.

    ``superset_index`` of None means the block-level lane; otherwise it
    names the superset lane at that index within the block.

    Examples:
        >>> # Third exercise of the block-level lane of the first block
        >>> ExerciseLocation(block_index=0, exercise_index=2)

        >>> # First exercise of the second superset of the first block
        >>> ExerciseLocation(block_index=0, exercise_index=0, superset_index=1)
    """

    block_index: int = Field(..., ge=0)
    exercise_index: int = Field(..., ge=0)
    superset_index: Optional[int] = Field(default=None, ge=0)

    @property
    def in_superset(self) -> bool:
        """Check if this location points into a superset lane."""
        return self.superset_index is not None

    def same_lane(self, other: "ExerciseLocation") -> bool:
        """Check if both locations refer to the same lane."""
        return (
            self.block_index == other.block_index
            and self.superset_index == other.superset_index
        )

    def __str__(self) -> str:
        if self.superset_index is None:
            return f"blocks[{self.block_index}].exercises[{self.exercise_index}]"
        return (
            f"blocks[{self.block_index}].supersets[{self.superset_index}]"
            f".exercises[{self.exercise_index}]"
        )

    model_config = {"frozen": True}
