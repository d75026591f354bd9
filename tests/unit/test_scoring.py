"""Tests for score aggregation and feedback."""

import pytest

from eduquest.engine.scoring import (
    GOOD_UNDERSTANDING_FEEDBACK,
    MASTERY_FEEDBACK,
    NEEDS_PRACTICE_FEEDBACK,
    PASSED_FEEDBACK,
    ScoringRange,
    aggregate_score,
    select_feedback,
)
from eduquest.models.quiz import Difficulty, NextAction
from eduquest.schemas.attempts import AnswerSubmission
from eduquest.schemas.questions import SingleSelectQuestion


def _easy(qid, points=10):
    return SingleSelectQuestion(
        id=qid,
        prompt=f"Question {qid}",
        points=points,
        difficulty=Difficulty.EASY,
        options=[{"id": f"{qid}-right", "is_correct": True}, {"id": f"{qid}-wrong"}],
    )


@pytest.fixture
def two_easy_questions():
    return [_easy("1"), _easy("2")]


def _answer(qid, correct=True, time_spent=0):
    return AnswerSubmission(
        question_id=qid,
        selected_answer=f"{qid}-right" if correct else f"{qid}-wrong",
        time_spent=time_spent,
    )


def test_all_correct_scores_full_marks(two_easy_questions):
    summary = aggregate_score(two_easy_questions, [_answer("1"), _answer("2")], passing_score=60)

    assert summary.score == 20
    assert summary.total_possible_score == 20
    assert summary.percentage == 100
    assert summary.passed is True
    assert summary.feedback == MASTERY_FEEDBACK
    assert summary.correct_count == 2


def test_half_correct_fails(two_easy_questions):
    summary = aggregate_score(
        two_easy_questions, [_answer("1"), _answer("2", correct=False)], passing_score=60
    )

    assert summary.score == 10
    assert summary.percentage == 50
    assert summary.passed is False
    assert summary.feedback == NEEDS_PRACTICE_FEEDBACK


def test_unanswered_questions_still_count_toward_total(two_easy_questions):
    summary = aggregate_score(two_easy_questions, [_answer("1")], passing_score=50)
    assert summary.percentage == 50
    assert summary.passed is True
    assert len(summary.answers) == 1


def test_unknown_and_duplicate_answers_are_skipped(two_easy_questions):
    answers = [
        _answer("1"),
        _answer("1", correct=False),
        AnswerSubmission(question_id="999", selected_answer="x"),
    ]
    summary = aggregate_score(two_easy_questions, answers, passing_score=60)

    assert [a.question_id for a in summary.answers] == ["1"]
    assert summary.score == 10
    assert 0 <= summary.percentage <= 100


def test_integer_question_ids_are_matched():
    summary = aggregate_score([_easy("5")], [_answer(5)], passing_score=60)
    # AnswerSubmission stringifies ids, so "5" is found
    assert summary.score == 10


def test_empty_question_set_gives_zero_percent():
    summary = aggregate_score([], [], passing_score=0)
    assert summary.percentage == 0
    assert summary.passed is True


def test_time_spent_is_carried_per_answer(two_easy_questions):
    summary = aggregate_score(two_easy_questions, [_answer("1", time_spent=12)], 60)
    assert summary.answers[0].time_spent == 12


@pytest.mark.parametrize("percentage,passing,expected", [
    (95, 60, MASTERY_FEEDBACK),
    (90, 60, MASTERY_FEEDBACK),
    (75, 60, GOOD_UNDERSTANDING_FEEDBACK),
    (65, 60, PASSED_FEEDBACK),
    (59.9, 60, NEEDS_PRACTICE_FEEDBACK),
    (50, 40, PASSED_FEEDBACK),
])
def test_feedback_ladder(percentage, passing, expected):
    feedback, next_action = select_feedback(percentage, passing)
    assert feedback == expected
    assert next_action is None


def test_first_matching_range_wins():
    ranges = [
        ScoringRange(0, 49, "Try the easier version", NextAction.EASIER_VERSION),
        ScoringRange(50, 100, "Move on", NextAction.NEXT_LEVEL),
        ScoringRange(50, 100, "Never used", NextAction.REPEAT),
    ]
    assert select_feedback(80, 60, ranges) == ("Move on", NextAction.NEXT_LEVEL)
    assert select_feedback(49, 60, ranges) == ("Try the easier version", NextAction.EASIER_VERSION)


def test_no_matching_range_means_no_feedback():
    ranges = [ScoringRange(90, 100, "Great", NextAction.HARDER_VERSION)]
    assert select_feedback(70, 60, ranges) == (None, None)


@pytest.mark.parametrize("passing_score", [0, 33.3, 50, 60, 100])
def test_pass_matches_threshold(two_easy_questions, passing_score):
    for answers in ([], [_answer("1")], [_answer("1"), _answer("2")]):
        summary = aggregate_score(two_easy_questions, answers, passing_score)
        assert summary.passed == (summary.percentage >= passing_score)
        assert summary.percentage == pytest.approx(100 * summary.score / 20)
