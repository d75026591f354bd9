"""Tests for progress calculation and level math."""

import pytest

from eduquest.engine.levels import level_for_points
from eduquest.engine.progress import compute_progress
from eduquest.utils.timeutils import round_half_up


@pytest.mark.parametrize("completed,total,percentage,done", [
    (0, 0, 0, False),
    (0, 4, 0, False),
    (3, 4, 75, False),
    (4, 4, 100, True),
    (1, 3, 33, False),
    (2, 3, 67, False),
    (1, 8, 13, False),  # 12.5 rounds half up
])
def test_compute_progress(completed, total, percentage, done):
    snapshot = compute_progress(completed, total)
    assert snapshot.percentage == percentage
    assert snapshot.is_completed is done
    assert snapshot.total_lessons == total


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0) == 0


@pytest.mark.parametrize("points,level", [(0, 1), (99, 1), (100, 2), (199, 2), (250, 3), (1000, 11)])
def test_level_is_pure_function_of_points(points, level):
    assert level_for_points(points) == level
