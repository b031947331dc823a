"""
Unit tests for the mutation engine (domain/services/mutations.py).

Tests for:
- Block reordering and its index adjustment
- Exercise moves within and across lanes, including lazy supersets
- Add/delete/update operations and their no-op semantics
- Copy-on-write: inputs are never modified
- Identity uniqueness and exercise conservation across operations
"""

import pytest
from pydantic import ValidationError

from domain.exceptions import StructuralIndexError
from domain.models import EditorDefaults, ExerciseLocation, RestType, Workout
from domain.services import mutations
from domain.services.invariants import (
    collect_ids,
    count_exercises,
    find_duplicate_ids,
    find_invariant_violations,
)


def loc(block_index, exercise_index, superset_index=None) -> ExerciseLocation:
    return ExerciseLocation(
        block_index=block_index,
        exercise_index=exercise_index,
        superset_index=superset_index,
    )


def lane_ids(workout: Workout, block_index: int, superset_index=None):
    block = workout.blocks[block_index]
    lane = block.exercises if superset_index is None else block.supersets[superset_index].exercises
    return [ex.id for ex in lane]


def block_ids(workout: Workout):
    return [b.id for b in workout.blocks]


@pytest.fixture
def five_blocks(allocator) -> Workout:
    """Workout with blocks b0..b4 and nothing in them."""
    workout = Workout(title="Five")
    for _ in range(5):
        workout = mutations.add_block(workout, allocator)
    return workout


# =============================================================================
# MoveBlock
# =============================================================================


@pytest.mark.unit
class TestMoveBlock:
    """Tests for move_block."""

    def test_same_index_is_noop(self, workout):
        """Moving a block onto itself returns the same document."""
        assert mutations.move_block(workout, 1, 1) is workout

    def test_move_up(self, workout):
        """Moving up inserts at the target index."""
        result = mutations.move_block(workout, 1, 0)
        assert block_ids(result) == ["b-2", "b-1"]

    def test_move_down_to_end(self, workout):
        """Dropping at len() puts the block last."""
        result = mutations.move_block(workout, 0, 2)
        assert block_ids(result) == ["b-2", "b-1"]

    def test_move_down_to_next_slot_keeps_order(self, workout):
        """Dropping just below yourself lands on the same position."""
        result = mutations.move_block(workout, 0, 1)
        assert block_ids(result) == ["b-1", "b-2"]

    @pytest.mark.parametrize("source,target", [
        (0, 3), (0, 5), (4, 0), (3, 1), (2, 4), (1, 2), (4, 5),
    ])
    def test_reorder_correctness(self, five_blocks, source, target):
        """The moved block lands at target (moving up) or target-1 (moving down)."""
        before = block_ids(five_blocks)
        moved = before[source]

        result = mutations.move_block(five_blocks, source, target)
        after = block_ids(result)

        expected_index = target - 1 if source < target else target
        assert after[expected_index] == moved
        # Every other block keeps its relative order
        assert [b for b in after if b != moved] == [b for b in before if b != moved]

    @pytest.mark.parametrize("source,target", [(2, 0), (-1, 0), (0, 3), (0, -1), (5, 5)])
    def test_out_of_range_raises(self, workout, source, target):
        """Out-of-range indices are rejected, never clamped."""
        with pytest.raises(StructuralIndexError):
            mutations.move_block(workout, source, target)

    def test_error_is_an_index_error(self, workout):
        """StructuralIndexError is catchable as IndexError."""
        with pytest.raises(IndexError):
            mutations.move_block(workout, 7, 0)

    def test_input_not_mutated(self, workout):
        """The original document is left untouched."""
        snapshot = workout.model_dump()
        mutations.move_block(workout, 1, 0)
        assert workout.model_dump() == snapshot

    def test_blocks_are_shared(self, workout):
        """Moved blocks are the same objects, not copies."""
        result = mutations.move_block(workout, 1, 0)
        assert result.blocks[0] is workout.blocks[1]
        assert result.blocks[1] is workout.blocks[0]


# =============================================================================
# MoveExercise
# =============================================================================


@pytest.mark.unit
class TestMoveExercise:
    """Tests for move_exercise."""

    def test_block_lane_to_other_block_lane(self, workout, allocator):
        """Exercise leaves the source lane and lands at the target index."""
        result = mutations.move_exercise(workout, loc(0, 0), loc(1, 0), allocator)
        assert lane_ids(result, 0) == ["e-2"]
        assert lane_ids(result, 1) == ["e-1", "e-3"]

    def test_block_lane_to_superset(self, workout, allocator):
        """Exercise can move from a block lane into an existing superset."""
        result = mutations.move_exercise(workout, loc(0, 1), loc(1, 1, 0), allocator)
        assert lane_ids(result, 0) == ["e-1"]
        assert lane_ids(result, 1, 0) == ["e-4", "e-2", "e-5"]

    def test_superset_to_block_lane(self, workout, allocator):
        """Exercise can move out of a superset into a block lane."""
        result = mutations.move_exercise(workout, loc(1, 1, 0), loc(0, 2), allocator)
        assert lane_ids(result, 1, 0) == ["e-4"]
        assert lane_ids(result, 0) == ["e-1", "e-2", "e-5"]

    def test_superset_to_empty_superset(self, workout, allocator):
        """An existing empty superset accepts an exercise at index 0."""
        result = mutations.move_exercise(workout, loc(1, 0, 0), loc(1, 0, 1), allocator)
        assert lane_ids(result, 1, 0) == ["e-5"]
        assert lane_ids(result, 1, 1) == ["e-4"]

    def test_emptied_superset_persists(self, workout, allocator):
        """Moving the last exercise out leaves an empty superset behind."""
        step = mutations.move_exercise(workout, loc(1, 0, 0), loc(0, 0), allocator)
        result = mutations.move_exercise(step, loc(1, 0, 0), loc(0, 0), allocator)
        assert [ss.id for ss in result.blocks[1].supersets] == ["s-1", "s-2"]
        assert result.blocks[1].supersets[0].exercises == []

    def test_lazy_superset_creation(self, allocator):
        """Targeting a superset slot that does not exist creates it."""
        workout = Workout(
            title="Lazy",
            blocks=[{"id": "b-1", "exercises": [{"id": "e-1", "name": "Squat"}], "supersets": []}],
        )

        result = mutations.move_exercise(workout, loc(0, 0), loc(0, 0, 0), allocator)

        block = result.blocks[0]
        assert block.exercises == []
        assert len(block.supersets) == 1
        superset = block.supersets[0]
        assert [ex.id for ex in superset.exercises] == ["e-1"]
        assert superset.rest_between_sec == 60
        assert superset.id and superset.id.startswith("t-")
        assert superset.id not in {"b-1", "e-1"}

    def test_lazy_superset_uses_defaults(self, workout, allocator):
        """A materialized superset takes its rest from EditorDefaults."""
        defaults = EditorDefaults(superset_rest_between_sec=30)
        result = mutations.move_exercise(workout, loc(0, 0), loc(1, 0, 2), allocator, defaults)
        assert result.blocks[1].supersets[2].rest_between_sec == 30

    def test_lazy_superset_beyond_next_slot_raises(self, workout, allocator):
        """Only the next free superset slot can be materialized."""
        with pytest.raises(StructuralIndexError) as exc_info:
            mutations.move_exercise(workout, loc(0, 0), loc(1, 0, 3), allocator)
        assert exc_info.value.kind == "superset"

    def test_same_location_is_true_noop(self, workout, allocator):
        """Dropping an exercise on its own spot returns the same document."""
        assert mutations.move_exercise(workout, loc(1, 1, 0), loc(1, 1, 0), allocator) is workout

    def test_same_lane_move_down(self, workout, allocator):
        """Within a lane, the target index is the post-removal index."""
        result = mutations.move_exercise(workout, loc(1, 0, 0), loc(1, 1, 0), allocator)
        assert lane_ids(result, 1, 0) == ["e-5", "e-4"]

    def test_same_lane_last_to_first(self, allocator):
        """Moving the last item to index 0 puts it first."""
        workout = Workout(blocks=[{"id": "b", "exercises": [
            {"id": "a", "name": "A"}, {"id": "b2", "name": "B"}, {"id": "c", "name": "C"},
        ]}])
        result = mutations.move_exercise(workout, loc(0, 2), loc(0, 0), allocator)
        assert lane_ids(result, 0) == ["c", "a", "b2"]

    def test_same_lane_first_to_end(self, allocator):
        """Moving the first item to the end uses len-1 after removal."""
        workout = Workout(blocks=[{"id": "b", "exercises": [
            {"id": "a", "name": "A"}, {"id": "b2", "name": "B"}, {"id": "c", "name": "C"},
        ]}])
        drop = mutations.same_lane_target_index(0, 3)
        assert drop == 2
        result = mutations.move_exercise(workout, loc(0, 0), loc(0, drop), allocator)
        assert lane_ids(result, 0) == ["b2", "c", "a"]

    def test_same_lane_unadjusted_end_index_raises(self, allocator):
        """Passing the pre-removal length as target is out of range."""
        workout = Workout(blocks=[{"id": "b", "exercises": [
            {"id": "a", "name": "A"}, {"id": "b2", "name": "B"},
        ]}])
        with pytest.raises(StructuralIndexError) as exc_info:
            mutations.move_exercise(workout, loc(0, 0), loc(0, 2), allocator)
        assert exc_info.value.kind == "position"

    @pytest.mark.parametrize("source", [
        loc(2, 0),          # no such block
        loc(0, 2),          # no such exercise
        loc(1, 0, 5),       # no such superset
        loc(1, 0, 1),       # empty superset
    ])
    def test_missing_source_raises(self, workout, allocator, source):
        """A stale source location is a structural error."""
        with pytest.raises(StructuralIndexError):
            mutations.move_exercise(workout, source, loc(0, 0), allocator)

    def test_missing_target_block_raises(self, workout, allocator):
        """Target block must exist; nothing is created at block level."""
        with pytest.raises(StructuralIndexError) as exc_info:
            mutations.move_exercise(workout, loc(0, 0), loc(4, 0), allocator)
        assert exc_info.value.kind == "block"

    def test_target_position_past_end_raises(self, workout, allocator):
        """Insertion index must be within 0..len of the target lane."""
        with pytest.raises(StructuralIndexError):
            mutations.move_exercise(workout, loc(0, 0), loc(1, 2), allocator)

    def test_input_not_mutated(self, workout, allocator):
        """Source and target documents are independent snapshots."""
        snapshot = workout.model_dump()
        mutations.move_exercise(workout, loc(0, 0), loc(1, 0, 2), allocator)
        assert workout.model_dump() == snapshot

    def test_untouched_block_shared(self, workout, allocator):
        """Blocks the move does not touch are reused as-is."""
        result = mutations.move_exercise(workout, loc(1, 0, 0), loc(1, 0), allocator)
        assert result.blocks[0] is workout.blocks[0]

    def test_round_trip_restores_document(self, workout, allocator):
        """A -> B -> A yields the original document."""
        there = mutations.move_exercise(workout, loc(0, 1), loc(1, 1, 0), allocator)
        back = mutations.move_exercise(there, loc(1, 1, 0), loc(0, 1), allocator)
        assert back == workout

    def test_round_trip_leaves_materialized_superset(self, workout, allocator):
        """A -> new superset -> A leaves the created superset behind, empty."""
        there = mutations.move_exercise(workout, loc(0, 0), loc(1, 0, 2), allocator)
        back = mutations.move_exercise(there, loc(1, 0, 2), loc(0, 0), allocator)

        assert back != workout
        assert len(back.blocks[1].supersets) == 3
        assert back.blocks[1].supersets[2].exercises == []
        # Apart from the residue, everything is as before
        trimmed = mutations.delete_superset(back, 1, 2)
        assert trimmed == workout

    @pytest.mark.parametrize("source,target", [
        (loc(0, 0), loc(1, 1)),
        (loc(1, 0, 0), loc(1, 0, 1)),
        (loc(1, 1, 0), loc(0, 0)),
        (loc(0, 1), loc(1, 0, 2)),
        (loc(1, 0), loc(1, 0, 0)),
    ])
    def test_conserves_exercises_and_ids(self, workout, allocator, source, target):
        """Moves never create or lose exercises, and ids stay unique."""
        result = mutations.move_exercise(workout, source, target, allocator)
        assert count_exercises(result) == count_exercises(workout)
        assert find_duplicate_ids(result) == []
        assert find_invariant_violations(result) == []


# =============================================================================
# Exercises
# =============================================================================


@pytest.mark.unit
class TestAddExercise:
    """Tests for add_exercise."""

    def test_appends_with_defaults(self, workout, allocator):
        """New exercise gets default prescription and a fresh id."""
        result = mutations.add_exercise(workout, 0, "Push Up", allocator)

        added = result.blocks[0].exercises[-1]
        assert added.name == "Push Up"
        assert added.sets == 3
        assert added.reps == 10
        assert added.rest_sec == 60
        assert added.type == "strength"
        assert added.reps_range is None
        assert added.duration_sec is None
        assert added.distance_m is None
        assert added.distance_range is None
        assert added.notes is None
        assert added.id.startswith("t-")
        assert lane_ids(result, 0)[:2] == ["e-1", "e-2"]

    def test_appends_to_superset(self, workout, allocator):
        """Exercise is appended to the end of the named superset."""
        result = mutations.add_exercise(workout, 1, "Dip", allocator, superset_index=0)
        assert [ex.name for ex in result.blocks[1].supersets[0].exercises] == [
            "Curl", "Pushdown", "Dip",
        ]

    def test_materializes_superset(self, workout, allocator):
        """Adding into the next free superset slot creates it."""
        result = mutations.add_exercise(workout, 0, "Dip", allocator, superset_index=0)
        superset = result.blocks[0].supersets[0]
        assert superset.rest_between_sec == 60
        assert [ex.name for ex in superset.exercises] == ["Dip"]
        assert find_invariant_violations(result) == []

    def test_empty_name_accepted(self, workout, allocator):
        """Names are not validated by the engine."""
        result = mutations.add_exercise(workout, 0, "", allocator)
        assert result.blocks[0].exercises[-1].name == ""

    def test_custom_defaults(self, workout, allocator):
        """EditorDefaults override the stock prescription."""
        defaults = EditorDefaults(exercise_sets=5, exercise_reps=5, exercise_type="power")
        result = mutations.add_exercise(workout, 0, "Clean", allocator, defaults=defaults)
        added = result.blocks[0].exercises[-1]
        assert (added.sets, added.reps, added.type) == (5, 5, "power")

    def test_missing_block_raises(self, workout, allocator):
        """Adding to a block that does not exist is a structural error."""
        with pytest.raises(StructuralIndexError):
            mutations.add_exercise(workout, 2, "Dip", allocator)


@pytest.mark.unit
class TestDeleteExercise:
    """Tests for delete_exercise."""

    def test_removes_by_position(self, workout):
        """The exercise at the index is removed; order of the rest is kept."""
        result = mutations.delete_exercise(workout, 1, 0, superset_index=0)
        assert lane_ids(result, 1, 0) == ["e-5"]

    def test_delete_twice_is_idempotent(self, workout):
        """A second delete with stale indices changes nothing and does not raise."""
        single = Workout(blocks=[{"id": "b", "exercises": [{"id": "only", "name": "X"}]}])
        once = mutations.delete_exercise(single, 0, 0)
        twice = mutations.delete_exercise(once, 0, 0)
        assert twice is once
        assert once.blocks[0].exercises == []

    @pytest.mark.parametrize("args", [
        (5, 0, None),
        (0, 9, None),
        (1, 0, 4),
        (1, 0, 1),
        (0, -1, None),
    ])
    def test_missing_target_is_noop(self, workout, args):
        """Deleting something that is not there returns the input."""
        block_index, exercise_index, superset_index = args
        assert mutations.delete_exercise(
            workout, block_index, exercise_index, superset_index
        ) is workout


@pytest.mark.unit
class TestUpdateExercise:
    """Tests for update_exercise."""

    def test_shallow_merge(self, workout):
        """Named fields change; everything else stays."""
        result = mutations.update_exercise(workout, 1, 0, {"reps": 3, "notes": "heavy"})
        updated = result.blocks[1].exercises[0]
        assert updated.reps == 3
        assert updated.notes == "heavy"
        assert updated.sets == 5
        assert updated.rest_sec == 120
        assert updated.id == "e-3"

    def test_id_cannot_be_changed(self, workout):
        """The identifier is never overwritten by an update."""
        result = mutations.update_exercise(workout, 0, 0, {"id": "hijack", "name": "Jacks"})
        assert result.blocks[0].exercises[0].id == "e-1"
        assert result.blocks[0].exercises[0].name == "Jacks"

    def test_superset_exercise(self, workout):
        """Exercises inside supersets can be updated."""
        result = mutations.update_exercise(workout, 1, 1, {"sets": 4}, superset_index=0)
        assert result.blocks[1].supersets[0].exercises[1].sets == 4

    def test_values_are_validated(self, workout):
        """Enum-typed fields are coerced; wrong types are rejected."""
        result = mutations.update_exercise(workout, 0, 0, {"rest_type": "button"})
        assert result.blocks[0].exercises[0].rest_type == RestType.BUTTON

        with pytest.raises(ValidationError):
            mutations.update_exercise(workout, 0, 0, {"sets": "many"})

    def test_missing_exercise_raises(self, workout):
        """Updates require the target to exist."""
        with pytest.raises(StructuralIndexError):
            mutations.update_exercise(workout, 0, 5, {"reps": 1})


# =============================================================================
# Supersets
# =============================================================================


@pytest.mark.unit
class TestSupersets:
    """Tests for add_superset, delete_superset and update_superset."""

    def test_add_superset(self, workout, allocator):
        """A new empty superset is appended with default rest."""
        result = mutations.add_superset(workout, 0, allocator)
        supersets = result.blocks[0].supersets
        assert len(supersets) == 1
        assert supersets[0].exercises == []
        assert supersets[0].rest_between_sec == 60
        assert supersets[0].id.startswith("t-")

    def test_add_superset_missing_block_raises(self, workout, allocator):
        with pytest.raises(StructuralIndexError):
            mutations.add_superset(workout, 3, allocator)

    def test_delete_superset(self, workout):
        """Deleting removes the superset and its exercises."""
        result = mutations.delete_superset(workout, 1, 0)
        assert [ss.id for ss in result.blocks[1].supersets] == ["s-2"]
        assert count_exercises(result) == count_exercises(workout) - 2

    @pytest.mark.parametrize("block_index,superset_index", [(0, 0), (1, 2), (3, 0)])
    def test_delete_missing_superset_is_noop(self, workout, block_index, superset_index):
        assert mutations.delete_superset(workout, block_index, superset_index) is workout

    def test_update_superset_rest(self, workout):
        """Superset fields merge; exercises are untouched."""
        result = mutations.update_superset(workout, 1, 0, {"rest_between_sec": 30, "id": "x"})
        superset = result.blocks[1].supersets[0]
        assert superset.rest_between_sec == 30
        assert superset.id == "s-1"
        assert superset.exercises == workout.blocks[1].supersets[0].exercises
        assert superset.exercises[0] is workout.blocks[1].supersets[0].exercises[0]

    def test_update_missing_superset_raises(self, workout):
        with pytest.raises(StructuralIndexError):
            mutations.update_superset(workout, 0, 0, {"rest_between_sec": 30})


# =============================================================================
# Blocks
# =============================================================================


@pytest.mark.unit
class TestBlocks:
    """Tests for add_block, delete_block, update_block and apply_block_rest."""

    def test_add_block_numbering(self, allocator):
        """New block label is based on the block count, not existing labels."""
        workout = Workout(blocks=[
            {"id": "x", "label": "Warm-up"},
            {"id": "y", "label": "Block 7"},
        ])
        result = mutations.add_block(workout, allocator)
        new_block = result.blocks[-1]
        assert new_block.label == "Block 3"
        assert new_block.exercises == []
        assert new_block.supersets == []
        assert new_block.structure is None
        assert new_block.id.startswith("t-")

    def test_add_block_to_empty_workout(self, allocator):
        result = mutations.add_block(Workout(), allocator)
        assert [b.label for b in result.blocks] == ["Block 1"]

    def test_delete_block(self, workout):
        result = mutations.delete_block(workout, 0)
        assert block_ids(result) == ["b-2"]

    def test_delete_missing_block_is_noop(self, workout):
        assert mutations.delete_block(workout, 2) is workout

    def test_update_block_merges_fields(self, workout):
        """Block fields merge; lanes and id stay as they were."""
        result = mutations.update_block(
            workout, 1, {"label": "Strength", "time_cap_sec": 600, "id": "nope"}
        )
        block = result.blocks[1]
        assert block.label == "Strength"
        assert block.time_cap_sec == 600
        assert block.rest_between_rounds_sec == 90
        assert block.id == "b-2"
        assert block.exercises[0] is workout.blocks[1].exercises[0]
        assert block.supersets[0] is workout.blocks[1].supersets[0]

    def test_update_block_ignores_lane_replacement(self, workout):
        """Lanes can only change through structural operations."""
        result = mutations.update_block(workout, 0, {"exercises": []})
        assert lane_ids(result, 0) == ["e-1", "e-2"]

    def test_update_block_missing_raises(self, workout):
        with pytest.raises(StructuralIndexError):
            mutations.update_block(workout, 9, {"label": "x"})

    def test_apply_block_rest_timed(self, workout):
        """Timed rest is applied to every exercise in both lanes."""
        result = mutations.apply_block_rest(
            workout, 1, label="Main Work", rest_type=RestType.TIMED, rest_sec=75
        )
        block = result.blocks[1]
        assert block.label == "Main Work"
        assert block.rest_type == RestType.TIMED
        for exercise in block.iter_exercises():
            assert exercise.rest_sec == 75
            assert exercise.rest_type == RestType.TIMED
        # Other blocks untouched
        assert result.blocks[0] is workout.blocks[0]

    def test_apply_block_rest_button_clears_seconds(self, workout):
        """Lap-button rest clears rest_sec on every exercise."""
        result = mutations.apply_block_rest(workout, 1, rest_type="button", rest_sec=30)
        for exercise in result.blocks[1].iter_exercises():
            assert exercise.rest_sec is None
            assert exercise.rest_type == RestType.BUTTON

    def test_apply_block_rest_clamps(self, workout):
        """Rest seconds are clamped to 0..600."""
        result = mutations.apply_block_rest(workout, 0, rest_sec=9000)
        assert {ex.rest_sec for ex in result.blocks[0].exercises} == {600}

    def test_apply_block_rest_label_only(self, workout):
        """With only a label, exercises are shared unchanged."""
        result = mutations.apply_block_rest(workout, 0, label="Prep")
        assert result.blocks[0].label == "Prep"
        assert result.blocks[0].exercises is workout.blocks[0].exercises

    def test_apply_block_rest_nothing_is_noop(self, workout):
        assert mutations.apply_block_rest(workout, 0) is workout


# =============================================================================
# Workout-level properties
# =============================================================================


@pytest.mark.unit
class TestDocumentProperties:
    """Invariants that must hold across sequences of operations."""

    def test_update_title(self, workout):
        assert mutations.update_title(workout, "New").title == "New"
        assert mutations.update_title(workout, workout.title) is workout

    def test_ids_unique_after_many_operations(self, workout, allocator):
        """A long sequence of edits never produces duplicate ids."""
        current = workout
        current = mutations.add_block(current, allocator)
        current = mutations.add_exercise(current, 2, "A", allocator)
        current = mutations.add_exercise(current, 2, "B", allocator, superset_index=0)
        current = mutations.add_superset(current, 0, allocator)
        current = mutations.move_exercise(current, loc(2, 0), loc(0, 0, 0), allocator)
        current = mutations.move_exercise(current, loc(1, 0), loc(1, 0, 2), allocator)
        current = mutations.move_block(current, 2, 0)
        current = mutations.add_exercise(current, 1, "C", allocator, superset_index=1)

        ids = collect_ids(current)
        assert None not in ids
        assert len(ids) == len(set(ids))
        assert find_invariant_violations(current) == []

    def test_prior_snapshots_stay_valid(self, workout, allocator):
        """Every intermediate document is a frozen, unchanged snapshot."""
        snapshots = [workout]
        dumps = [workout.model_dump()]
        for step in range(3):
            nxt = mutations.add_exercise(snapshots[-1], 0, f"Ex {step}", allocator)
            snapshots.append(nxt)
            dumps.append(nxt.model_dump())

        mutations.move_block(snapshots[-1], 0, 2)
        for snapshot, dump in zip(snapshots, dumps):
            assert snapshot.model_dump() == dump
