"""
Superset value object: exercises performed back-to-back with one shared rest.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from domain.models.exercise import Exercise


class Superset(BaseModel):
    """
    An ordered group of exercises nested directly under one Block.

    An empty superset is valid and stays in the document until it is
    explicitly deleted.
    """

    id: Optional[str] = Field(default=None, description="Document-unique identifier")
    exercises: List[Exercise] = Field(
        default_factory=list, description="Exercises in this superset lane"
    )
    rest_between_sec: Optional[int] = Field(
        default=None, description="Rest after each pass through the superset"
    )

    @field_validator("exercises", mode="before")
    @classmethod
    def coerce_missing_exercises(cls, v):
        """Treat a null exercise list as empty."""
        return [] if v is None else v

    @property
    def exercise_count(self) -> int:
        """Get the number of exercises in this superset."""
        return len(self.exercises)

    @property
    def is_empty(self) -> bool:
        """Check if this superset holds no exercises."""
        return not self.exercises

    model_config = {
        "frozen": True,
        "extra": "allow",
    }
