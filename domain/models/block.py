"""
Block value object for workout structure.

A Block is a two-lane container: a block-level exercise lane plus an
ordered list of Superset lanes. Both are ordered independently.
"""

from enum import Enum
from typing import Iterator, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from domain.models.exercise import Exercise, RestType
from domain.models.superset import Superset


class BlockStructure(str, Enum):
    """
    Training structure a block follows.

    - SUPERSET / CIRCUIT: exercises performed back-to-back
    - TABATA / EMOM / AMRAP / FOR_TIME: timed formats
    - ROUNDS / SETS / STRAIGHT / REGULAR: repeated straight work

    Blocks may also carry a structure string outside this list; it is kept
    as written.
    """

    SUPERSET = "superset"
    CIRCUIT = "circuit"
    TABATA = "tabata"
    EMOM = "emom"
    AMRAP = "amrap"
    FOR_TIME = "for-time"
    ROUNDS = "rounds"
    SETS = "sets"
    STRAIGHT = "straight"
    REGULAR = "regular"


STRUCTURE_DISPLAY_NAMES = {
    BlockStructure.SUPERSET: "Superset",
    BlockStructure.CIRCUIT: "Circuit",
    BlockStructure.TABATA: "Tabata",
    BlockStructure.EMOM: "EMOM",
    BlockStructure.AMRAP: "AMRAP",
    BlockStructure.FOR_TIME: "For Time",
    BlockStructure.ROUNDS: "Rounds",
    BlockStructure.SETS: "Sets",
    BlockStructure.STRAIGHT: "Straight Sets",
    BlockStructure.REGULAR: "Regular",
}


def get_structure_display_name(structure: Optional[Union[BlockStructure, str]]) -> str:
    """
    Get the human-readable name for a block structure.

    Args:
        structure: Structure value, a free-form structure string, or None

    Returns:
        Display name, or "Regular" when no structure is set. Unknown
        strings are returned as-is.
    """
    if structure is None:
        return STRUCTURE_DISPLAY_NAMES[BlockStructure.REGULAR]
    try:
        return STRUCTURE_DISPLAY_NAMES[BlockStructure(structure)]
    except ValueError:
        return str(structure)


class Block(BaseModel):
    """
    Value object representing a top-level block of a workout.

    Examples:
        >>> block = Block(
        ...     id="b-1",
        ...     label="Main Lifts",
        ...     structure=BlockStructure.ROUNDS,
        ...     rest_between_rounds_sec=90,
        ...     exercises=[Exercise(id="e-1", name="Squat", sets=5, reps=5)],
        ...     supersets=[
        ...         Superset(
        ...             id="s-1",
        ...             rest_between_sec=60,
        ...             exercises=[
        ...                 Exercise(id="e-2", name="Curl", reps=12),
        ...                 Exercise(id="e-3", name="Pushdown", reps=12),
        ...             ],
        ...         )
        ...     ],
        ... )
        >>> block.exercise_count
        3
    """

    id: Optional[str] = Field(default=None, description="Document-unique identifier")
    label: Optional[str] = Field(default=None, description="Block label (e.g., 'Warm-up')")
    structure: Optional[Union[BlockStructure, str]] = Field(
        default=None,
        union_mode="left_to_right",
        description="Training structure; unknown values are kept as strings",
    )
    rest_type: Optional[RestType] = Field(
        default=None, description="Default rest type for the block"
    )

    rounds: Optional[int] = Field(default=None, description="Number of rounds")
    sets: Optional[int] = Field(default=None, description="Number of sets")
    rest_between_rounds_sec: Optional[int] = Field(default=None)
    rest_between_sets_sec: Optional[int] = Field(default=None)
    time_work_sec: Optional[int] = Field(default=None)
    time_rest_sec: Optional[int] = Field(default=None)
    time_cap_sec: Optional[int] = Field(default=None)

    exercises: List[Exercise] = Field(
        default_factory=list, description="Block-level exercise lane"
    )
    supersets: List[Superset] = Field(
        default_factory=list, description="Superset lanes, in order"
    )

    @field_validator("exercises", "supersets", mode="before")
    @classmethod
    def coerce_missing_lanes(cls, v):
        """Treat null lanes as empty lists."""
        return [] if v is None else v

    def iter_exercises(self) -> Iterator[Exercise]:
        """Yield every exercise in the block: block lane first, then supersets."""
        yield from self.exercises
        for superset in self.supersets:
            yield from superset.exercises

    @property
    def exercise_count(self) -> int:
        """Number of exercises across the block lane and all superset lanes."""
        return len(self.exercises) + sum(ss.exercise_count for ss in self.supersets)

    @property
    def exercise_names(self) -> List[str]:
        """Get list of exercise names in document order."""
        return [ex.name for ex in self.iter_exercises()]

    @property
    def structure_display_name(self) -> str:
        """Human-readable structure name."""
        return get_structure_display_name(self.structure)

    def __str__(self) -> str:
        """Human-readable string representation."""
        parts = [self.label or "(unlabeled)"]

        if self.structure is not None:
            parts.append(f"({self.structure_display_name})")

        names = self.exercise_names
        exercise_str = ", ".join(names[:3])
        if len(names) > 3:
            exercise_str += f" (+{len(names) - 3} more)"
        parts.append(f"[{exercise_str}]")

        return " ".join(parts)

    model_config = {
        "frozen": True,
        "extra": "allow",
        "json_schema_extra": {
            "examples": [
                {
                    "id": "b-1",
                    "label": "Block 1",
                    "structure": "rounds",
                    "rest_between_rounds_sec": 90,
                    "exercises": [{"id": "e-1", "name": "Squat", "sets": 5, "reps": 5}],
                    "supersets": [
                        {
                            "id": "s-1",
                            "rest_between_sec": 60,
                            "exercises": [{"id": "e-2", "name": "Curl", "reps": 12}],
                        }
                    ],
                },
            ]
        },
    }
