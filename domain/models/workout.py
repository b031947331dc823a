"""
Workout root - the document the structure editor operates on.

The Workout is owned by the caller and is never mutated in place: every
editor operation returns a new Workout, and prior instances remain valid
snapshots.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from domain.models.block import Block


class Workout(BaseModel):
    """
    Root of the hierarchical workout document.

    Examples:
        >>> from domain.models import Workout, Block, Exercise

        >>> workout = Workout(
        ...     title="Leg Day",
        ...     source="instagram",
        ...     blocks=[Block(id="b-1", exercises=[Exercise(id="e-1", name="Squat")])],
        ... )
        >>> workout.total_exercises
        1

        >>> # Edits never touch the original
        >>> renamed = workout.with_title("Leg Day (v2)")
        >>> workout.title
        'Leg Day'
    """

    title: str = Field(default="", description="Workout title/name")
    source: str = Field(default="", description="Where the workout came from")
    blocks: List[Block] = Field(
        default_factory=list, description="Top-level blocks, in order"
    )

    @field_validator("title", "source", mode="before")
    @classmethod
    def coerce_missing_text(cls, v):
        """Treat a null title/source as an empty string."""
        return "" if v is None else v

    @field_validator("blocks", mode="before")
    @classmethod
    def coerce_missing_blocks(cls, v):
        """Treat a null block list as empty."""
        return [] if v is None else v

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def block_count(self) -> int:
        """Get number of blocks in the workout."""
        return len(self.blocks)

    @property
    def total_exercises(self) -> int:
        """
        Get total number of exercises across all blocks and supersets.

        Returns:
            Total exercise count.
        """
        return sum(block.exercise_count for block in self.blocks)

    @property
    def total_supersets(self) -> int:
        """Get total number of supersets across all blocks."""
        return sum(len(block.supersets) for block in self.blocks)

    @property
    def exercise_names(self) -> List[str]:
        """
        Get flat list of all exercise names in document order.

        Returns:
            List of exercise names.
        """
        names = []
        for block in self.blocks:
            names.extend(block.exercise_names)
        return names

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def with_blocks(self, blocks: List[Block]) -> "Workout":
        """
        Return a new Workout with the given block list.

        Args:
            blocks: The new block list (not copied; callers pass a fresh list).

        Returns:
            New Workout instance sharing every untouched block.
        """
        return self.model_copy(update={"blocks": blocks})

    def with_title(self, title: str) -> "Workout":
        """Return a new Workout with the title replaced."""
        return self.model_copy(update={"title": title})

    def __str__(self) -> str:
        """Human-readable string representation."""
        parts = [f'"{self.title}"']
        parts.append(f"{self.block_count} blocks")
        parts.append(f"{self.total_exercises} exercises")
        return f"Workout({', '.join(parts)})"

    model_config = {
        "frozen": True,
        "extra": "allow",
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Full Body Strength",
                    "source": "manual",
                    "blocks": [
                        {
                            "id": "b-1",
                            "label": "Block 1",
                            "exercises": [
                                {"id": "e-1", "name": "Squat", "sets": 5, "reps": 5},
                            ],
                            "supersets": [],
                        }
                    ],
                }
            ]
        },
    }
