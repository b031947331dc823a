"""
Exercise value object for the workout structure editor.

An Exercise is a leaf of the workout tree. It lives in exactly one lane:
either a Block's own exercise list or a Superset's exercise list.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RestType(str, Enum):
    """
    How rest after an exercise is ended on the device.

    - TIMED: rest for ``rest_sec`` seconds
    - BUTTON: rest until the athlete presses the lap button
    """

    TIMED = "timed"
    BUTTON = "button"


class Exercise(BaseModel):
    """
    Value object representing an exercise within a block or superset.

    ``id`` is optional so that documents coming from ingestion can be
    validated before normalization fills in the missing identifiers.
    Unknown fields are kept as-is so nothing the upstream producer sent is
    lost on the way to export.

    Examples:
        >>> exercise = Exercise(id="ex-1", name="Bench Press", sets=4, reps=8)
        >>> exercise.is_rep_based
        True

        >>> exercise = Exercise(name="Row", distance_m=500)
        >>> exercise.has_distance
        True
    """

    # Identity
    id: Optional[str] = Field(default=None, description="Document-unique identifier")
    name: str = Field(default="", description="Exercise name (display/raw)")

    # Work prescription
    sets: Optional[int] = Field(default=None, description="Number of sets")
    reps: Optional[int] = Field(default=None, description="Reps per set")
    reps_range: Optional[str] = Field(
        default=None, description="Rep range as written (e.g. '8-12')"
    )
    duration_sec: Optional[int] = Field(
        default=None, description="Duration in seconds for timed exercises"
    )

    # Rest
    rest_sec: Optional[int] = Field(
        default=None, description="Rest period after exercise in seconds"
    )
    rest_type: Optional[RestType] = Field(
        default=None, description="Timed rest or lap-button rest"
    )

    # Distance (for cardio exercises)
    distance_m: Optional[int] = Field(default=None, description="Distance in meters")
    distance_range: Optional[str] = Field(
        default=None, description="Distance range as written (e.g. '400-800m')"
    )

    notes: Optional[str] = Field(default=None, description="Additional instructions")
    type: Optional[str] = Field(
        default=None, description="Exercise kind (e.g. 'strength', 'cardio')"
    )

    @property
    def has_id(self) -> bool:
        """Check if this exercise carries a non-empty identifier."""
        return bool(self.id)

    @property
    def is_timed(self) -> bool:
        """Check if this is a time-based exercise."""
        return self.duration_sec is not None

    @property
    def is_rep_based(self) -> bool:
        """Check if this is a rep-based exercise."""
        return self.reps is not None or self.reps_range is not None

    @property
    def has_distance(self) -> bool:
        """Check if this exercise has a distance prescribed."""
        return self.distance_m is not None or self.distance_range is not None

    def __str__(self) -> str:
        """Human-readable string representation."""
        parts = [self.name or "(unnamed)"]

        if self.sets and self.reps:
            parts.append(f"{self.sets}x{self.reps}")
        elif self.sets and self.duration_sec:
            parts.append(f"{self.sets}x{self.duration_sec}s")
        elif self.reps:
            parts.append(f"{self.reps} reps")
        elif self.duration_sec:
            parts.append(f"{self.duration_sec}s")
        elif self.distance_m:
            parts.append(f"{self.distance_m}m")

        return " ".join(parts)

    model_config = {
        "frozen": True,  # Make immutable (value object semantics)
        "extra": "allow",
        "json_schema_extra": {
            "examples": [
                {
                    "id": "ex-1",
                    "name": "Bench Press",
                    "sets": 4,
                    "reps": 8,
                    "rest_sec": 90,
                    "type": "strength",
                },
                {
                    "id": "ex-2",
                    "name": "Ski Erg",
                    "distance_m": 500,
                    "rest_sec": 60,
                },
            ]
        },
    }
