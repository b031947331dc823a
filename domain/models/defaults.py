"""
Default values applied to nodes created by the editor.
"""

from pydantic import BaseModel, Field


class EditorDefaults(BaseModel):
    """
    Values used when the editor creates a new exercise or superset.

    Built from Settings in the backend (see ``Settings.editor_defaults``);
    the bare constructor gives the stock values.
    """

    superset_rest_between_sec: int = Field(default=60, ge=0)
    exercise_sets: int = Field(default=3, ge=1)
    exercise_reps: int = Field(default=10, ge=1)
    exercise_rest_sec: int = Field(default=60, ge=0)
    exercise_type: str = Field(default="strength")

    model_config = {"frozen": True}


DEFAULT_EDITOR_DEFAULTS = EditorDefaults()
