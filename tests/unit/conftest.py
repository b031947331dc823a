"""Pytest fixtures for workout editor unit tests."""

import pytest

from domain.models import Block, Exercise, Superset, Workout
from domain.services.id_allocator import IdAllocator


@pytest.fixture
def allocator() -> IdAllocator:
    """Fresh allocator with a recognizable prefix."""
    return IdAllocator(prefix="t-")


@pytest.fixture
def workout() -> Workout:
    """
    A normalized two-block workout.

    Block 0 ("Warm-up"): lane [e-1 Jumping Jacks, e-2 Arm Circles], no supersets
    Block 1 ("Main"):    lane [e-3 Squat],
                         supersets [s-1: [e-4 Curl, e-5 Pushdown],
                                    s-2: []]
    """
    return Workout(
        title="Upper/Lower",
        source="manual",
        blocks=[
            Block(
                id="b-1",
                label="Warm-up",
                exercises=[
                    Exercise(id="e-1", name="Jumping Jacks", duration_sec=60),
                    Exercise(id="e-2", name="Arm Circles", reps=20),
                ],
            ),
            Block(
                id="b-2",
                label="Main",
                structure="rounds",
                rest_between_rounds_sec=90,
                exercises=[Exercise(id="e-3", name="Squat", sets=5, reps=5, rest_sec=120)],
                supersets=[
                    Superset(
                        id="s-1",
                        rest_between_sec=45,
                        exercises=[
                            Exercise(id="e-4", name="Curl", sets=3, reps=12),
                            Exercise(id="e-5", name="Pushdown", sets=3, reps=12),
                        ],
                    ),
                    Superset(id="s-2", rest_between_sec=60, exercises=[]),
                ],
            ),
        ],
    )


@pytest.fixture
def incomplete_payload() -> dict:
    """An upstream payload with missing ids, null lanes, and extra fields."""
    return {
        "title": "Imported",
        "source": "instagram",
        "blocks": [
            {
                "label": "Block A",
                "exercises": [
                    {"name": "Burpee", "reps": 10, "video_url": "https://example.com/v"},
                    {"id": "keep-me", "name": "Plank", "duration_sec": 45},
                ],
                "supersets": None,
            },
            {
                "id": "block-b",
                "label": "Block B",
                "exercises": None,
                "supersets": [
                    {"exercises": [{"name": "Row", "distance_m": 500}]},
                ],
            },
        ],
    }
