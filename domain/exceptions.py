"""
Domain-layer exceptions for the workout structure editor.

These exceptions are raised by the mutation engine and translated into
result objects or HTTP responses by the application and API layers.
"""

from typing import Optional


class WorkoutEditError(Exception):
    """Base class for errors raised while editing a workout document."""

    pass


class StructuralIndexError(WorkoutEditError, IndexError):
    """A location an operation requires does not exist.

    Raised when an operation is asked to read from, or insert at, a block,
    superset, or exercise position that is not present in the document.
    This means the caller is holding a document that is out of sync with
    the one it indexed against, so it is never silently recovered.

    Attributes:
        kind: What was being addressed ("block", "superset", "exercise",
            or "position" for an insertion point).
        index: The offending index.
        size: Length of the list the index was checked against.
    """

    def __init__(
        self,
        kind: str,
        index: int,
        size: int,
        context: Optional[str] = None,
    ):
        self.kind = kind
        self.index = index
        self.size = size
        self.context = context
        message = f"{kind} index {index} out of range (size {size})"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)
