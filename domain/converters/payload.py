"""
Converter: editor payload (nested JSON dict) to Workout and back.

Upstream producers (ingestion, AI import) hand the editor nested dicts of
varying quality: ids may be missing, lists may be null, reps may arrive as
strings like "8-12" or "45s", and structure may be written as "3 rounds".
workout_from_payload() smooths those into the domain model; it does not
assign identifiers (that is the normalizer's job).

workout_to_payload() produces the nested dict handed to downstream
export and mapping services.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from domain.models import Block, BlockStructure, Exercise, Workout

logger = logging.getLogger(__name__)

_DURATION_SUFFIXES = ("seconds", "second", "secs", "sec", "s")


def _parse_reps(reps_raw: Any) -> Tuple[Optional[int], Optional[str], Optional[int]]:
    """
    Parse reps value into (int_reps, reps_range, duration_sec).

    Args:
        reps_raw: Reps value (int, str, or None)

    Returns:
        Tuple of (int_reps, reps_range, duration_sec).
    """
    if reps_raw is None:
        return None, None, None

    if isinstance(reps_raw, bool):
        return None, str(reps_raw), None

    if isinstance(reps_raw, int):
        return reps_raw, None, None

    if isinstance(reps_raw, float):
        return int(reps_raw), None, None

    reps_str = str(reps_raw).strip()
    if not reps_str:
        return None, None, None

    # Check for duration format (e.g., "60s", "30sec")
    lower = reps_str.lower()
    for suffix in _DURATION_SUFFIXES:
        if lower.endswith(suffix):
            num_part = reps_str[: -len(suffix)].strip()
            try:
                return None, None, int(float(num_part))
            except ValueError:
                break

    # Try to parse as integer
    try:
        return int(reps_str), None, None
    except ValueError:
        pass

    # Rep scheme kept as written (e.g., "8-12", "AMRAP", "3+1")
    return None, reps_str, None


def _parse_structure(
    structure_raw: Any,
) -> Tuple[Optional[Union[BlockStructure, str]], Optional[int]]:
    """
    Parse structure into (structure, rounds).

    Accepts enum values ("amrap"), display-ish spellings ("For Time") and
    legacy strings like "3 rounds" or "4 sets". Anything else is kept as the
    caller wrote it.
    """
    if structure_raw is None or structure_raw == "":
        return None, None

    text = str(structure_raw).strip().lower()
    candidate = text.replace(" ", "-")
    try:
        return BlockStructure(candidate), None
    except ValueError:
        pass

    match = re.match(r"^(\d+)\s*(rounds?|sets?)$", text)
    if match:
        count = int(match.group(1))
        if match.group(2).startswith("round"):
            return BlockStructure.ROUNDS, count
        return BlockStructure.SETS, count

    logger.debug(f"Keeping unrecognized structure value {structure_raw!r}")
    return str(structure_raw).strip(), None


def _require_mapping(value: Any, what: str) -> Dict[str, Any]:
    """Copy a payload node into a dict, rejecting anything that is not an object."""
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return dict(value)


def _convert_exercise(ex_data: Any) -> Optional[Exercise]:
    """Convert one exercise dict; null entries are dropped."""
    if ex_data is None:
        return None

    data = _require_mapping(ex_data, "Exercise")
    int_reps, reps_range, duration_sec = _parse_reps(data.get("reps"))
    data["reps"] = int_reps
    if reps_range is not None and not data.get("reps_range"):
        data["reps_range"] = reps_range
    if duration_sec is not None and data.get("duration_sec") is None:
        data["duration_sec"] = duration_sec

    # Accept the long-form rest key some producers send
    if data.get("rest_sec") is None and data.get("rest_seconds") is not None:
        data["rest_sec"] = data.pop("rest_seconds")

    if data.get("name") is None:
        data["name"] = ""

    return Exercise.model_validate(data)


def _convert_exercises(items: Optional[List[Any]]) -> List[Exercise]:
    converted = (_convert_exercise(item) for item in (items or []))
    return [ex for ex in converted if ex is not None]


def _convert_superset(ss_data: Any) -> Dict[str, Any]:
    data = _require_mapping(ss_data, "Superset")
    data["exercises"] = _convert_exercises(data.get("exercises"))
    return data


def _convert_block(block_data: Any) -> Block:
    """Convert one block dict, including its superset lanes."""
    data = _require_mapping(block_data, "Block")

    if data.get("label") is None and data.get("name"):
        data["label"] = data.pop("name")

    structure, rounds = _parse_structure(data.get("structure"))
    data["structure"] = structure
    if rounds is not None and data.get(structure.value) is None:
        data[structure.value] = rounds

    data["exercises"] = _convert_exercises(data.get("exercises"))
    data["supersets"] = [
        _convert_superset(ss)
        for ss in (data.get("supersets") or [])
        if ss is not None
    ]
    return Block.model_validate(data)


def workout_from_payload(data: Dict[str, Any]) -> Workout:
    """
    Convert an upstream payload into a Workout.

    Args:
        data: Nested dict with ``title``, ``source`` and ``blocks``

    Returns:
        Workout domain model (identifiers not yet filled in)

    Raises:
        ValueError: If a node is not an object
        pydantic.ValidationError: If a value cannot be coerced
    """
    data = _require_mapping(data, "Workout")
    blocks = [_convert_block(b) for b in (data.get("blocks") or []) if b is not None]
    return Workout.model_validate({**data, "blocks": blocks})


def workout_to_payload(workout: Workout) -> Dict[str, Any]:
    """
    Convert a Workout into the nested dict handed to export services.

    Every field is present (None where unset) so the shape is stable.
    """
    return workout.model_dump(mode="json")
