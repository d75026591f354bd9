"""Tests for adaptive difficulty selection."""

import pytest

from eduquest.engine.adaptive import PriorOutcome, select_starting_difficulty
from eduquest.models.quiz import Difficulty

EASY, MEDIUM, HARD = Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD


def test_non_adaptive_quiz_uses_configured_difficulty():
    result = select_starting_difficulty(
        HARD, is_adaptive=False, preferred=EASY, last_attempt=PriorOutcome(False, 10)
    )
    assert result == HARD


def test_preference_overrides_configured_tier():
    assert select_starting_difficulty(MEDIUM, is_adaptive=True, preferred=HARD) == HARD


def test_no_history_keeps_seed():
    assert select_starting_difficulty(MEDIUM, is_adaptive=True) == MEDIUM


@pytest.mark.parametrize("tier,expected", [(HARD, MEDIUM), (MEDIUM, EASY), (EASY, EASY)])
def test_failed_attempt_steps_down_with_floor(tier, expected):
    result = select_starting_difficulty(tier, True, last_attempt=PriorOutcome(False, 40))
    assert result == expected


@pytest.mark.parametrize("tier,expected", [(EASY, MEDIUM), (MEDIUM, HARD), (HARD, HARD)])
def test_strong_pass_steps_up_with_ceiling(tier, expected):
    result = select_starting_difficulty(tier, True, last_attempt=PriorOutcome(True, 90))
    assert result == expected


def test_pass_at_exactly_85_does_not_step_up():
    result = select_starting_difficulty(EASY, True, last_attempt=PriorOutcome(True, 85))
    assert result == EASY


def test_failure_scenario_walks_down_to_easy():
    played = HARD
    for expected in (MEDIUM, EASY, EASY):
        played = select_starting_difficulty(
            HARD, True, last_attempt=PriorOutcome(False, 20, difficulty=played)
        )
        assert played == expected


def test_last_played_tier_takes_precedence_over_preference():
    last = PriorOutcome(True, 60, difficulty=MEDIUM)
    assert select_starting_difficulty(EASY, True, preferred=HARD, last_attempt=last) == MEDIUM


def test_selection_is_idempotent_without_new_history():
    last = PriorOutcome(True, 95)
    first = select_starting_difficulty(EASY, True, preferred=MEDIUM, last_attempt=last)
    second = select_starting_difficulty(EASY, True, preferred=MEDIUM, last_attempt=last)
    assert first == second == HARD


def test_accepts_plain_string_tiers():
    assert select_starting_difficulty("medium", True, preferred="hard") == HARD
