"""
Domain services for the workout structure editor.

- id_allocator: process-unique identifiers for new nodes
- normalizer: fill in missing identifiers without touching other fields
- mutations: pure copy-on-write transitions (move, add, delete, update)
- invariants: read-only inspection (ids, locations, violations)
"""

from domain.services.id_allocator import IdAllocator
from domain.services.invariants import (
    collect_ids,
    count_exercises,
    find_duplicate_ids,
    find_invariant_violations,
    iter_exercises,
    locate_exercise,
)
from domain.services.mutations import (
    add_block,
    add_exercise,
    add_superset,
    apply_block_rest,
    delete_block,
    delete_exercise,
    delete_superset,
    move_block,
    move_exercise,
    new_exercise,
    same_lane_target_index,
    update_block,
    update_exercise,
    update_superset,
    update_title,
)
from domain.services.normalizer import is_normalized, normalize, normalize_payload

__all__ = [
    "IdAllocator",
    # Normalizer
    "is_normalized",
    "normalize",
    "normalize_payload",
    # Mutations
    "add_block",
    "add_exercise",
    "add_superset",
    "apply_block_rest",
    "delete_block",
    "delete_exercise",
    "delete_superset",
    "move_block",
    "move_exercise",
    "new_exercise",
    "same_lane_target_index",
    "update_block",
    "update_exercise",
    "update_superset",
    "update_title",
    # Inspection
    "collect_ids",
    "count_exercises",
    "find_duplicate_ids",
    "find_invariant_violations",
    "iter_exercises",
    "locate_exercise",
]
