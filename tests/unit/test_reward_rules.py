"""Tests for reward eligibility decisions and criteria variants."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from eduquest.engine.rewards import (
    RewardContext,
    award_reason,
    decide_awards,
    evaluate_custom_rule,
)
from eduquest.models.reward import RewardType
from eduquest.schemas.rewards import (
    CourseCompletionCriteria,
    CustomCriteria,
    PointsEarnedCriteria,
    QuizScoreCriteria,
    RewardCreate,
    StreakCriteria,
    criteria_adapter,
)

NOW = datetime(2026, 1, 1, 12, 0, 0)


class StubReward:
    def __init__(self, reward_id, criteria, expires_at=None, sold_out=False):
        self.id = reward_id
        self.criteria = criteria
        self.expires_at = expires_at
        self.sold_out = sold_out

    def is_expired(self, now):
        return self.expires_at is not None and self.expires_at < now

    def is_sold_out(self):
        return self.sold_out


@pytest.fixture
def context():
    return RewardContext(
        user_id=1,
        points=120,
        percentage=100,
        passed=True,
        attempts_count=1,
        progress=100,
        course_completed=True,
        quiz_title="Fractions",
        course_title="Algebra Basics",
    )


def test_held_rewards_are_skipped(context):
    candidates = [
        StubReward(1, PointsEarnedCriteria(threshold=10)),
        StubReward(2, PointsEarnedCriteria(threshold=50)),
    ]
    chosen = decide_awards(candidates, {1}, context, NOW)
    assert [r.id for r in chosen] == [2]


def test_duplicate_candidates_are_awarded_once(context):
    reward = StubReward(7, QuizScoreCriteria(quiz_id=1, threshold=80))
    chosen = decide_awards([reward, reward, reward], set(), context, NOW)
    assert chosen == [reward]


def test_expired_and_sold_out_are_skipped(context):
    expired = StubReward(1, PointsEarnedCriteria(threshold=0), expires_at=NOW - timedelta(days=1))
    sold_out = StubReward(2, PointsEarnedCriteria(threshold=0), sold_out=True)
    live = StubReward(3, PointsEarnedCriteria(threshold=0), expires_at=NOW + timedelta(days=1))
    chosen = decide_awards([expired, sold_out, live], set(), context, NOW)
    assert [r.id for r in chosen] == [3]


def test_custom_rules_fail_closed(context):
    known = StubReward(1, CustomCriteria(custom_rule="  Perfect-Score "))
    unknown = StubReward(2, CustomCriteria(custom_rule="logged in on a full moon"))
    chosen = decide_awards([known, unknown], set(), context, NOW)
    assert [r.id for r in chosen] == [1]


@pytest.mark.parametrize("rule,overrides,expected", [
    ("perfect-score", {"percentage": 100}, True),
    ("perfect-score", {"percentage": 99.5}, False),
    ("first-attempt-pass", {"attempts_count": 1, "passed": True}, True),
    ("first-attempt-pass", {"attempts_count": 2, "passed": True}, False),
    ("first-attempt-pass", {"attempts_count": 1, "passed": False}, False),
    ("course-completed", {"course_completed": False}, False),
    ("unknown-rule", {}, False),
])
def test_custom_rule_registry(context, rule, overrides, expected):
    for key, value in overrides.items():
        setattr(context, key, value)
    assert evaluate_custom_rule(rule, context) is expected


def test_award_reasons_by_criteria_kind(context):
    context.percentage = 87.5
    assert award_reason(PointsEarnedCriteria(threshold=100), context, "X") == "Earned 120 points"
    assert award_reason(CourseCompletionCriteria(course_id=1), context, "X") == (
        'Completed course "Algebra Basics" with 100% progress'
    )
    assert award_reason(QuizScoreCriteria(quiz_id=1, threshold=80), context, "X") == (
        'Scored 88% on quiz "Fractions"'
    )
    assert award_reason(StreakCriteria(threshold=3), context, "Streaker") == (
        "Met the criteria for Streaker"
    )


class TestCriteriaVariants:
    def test_quiz_score_requires_quiz_and_threshold(self):
        with pytest.raises(ValidationError):
            criteria_adapter.validate_python({"type": "quiz-score", "threshold": 80})
        with pytest.raises(ValidationError):
            criteria_adapter.validate_python({"type": "quiz-score", "quiz_id": 1})

    def test_course_completion_threshold_defaults_to_100(self):
        criteria = criteria_adapter.validate_python({"type": "course-completion", "course_id": 3})
        assert criteria.threshold == 100

    def test_custom_requires_rule_text(self):
        with pytest.raises(ValidationError):
            criteria_adapter.validate_python({"type": "custom", "custom_rule": ""})

    def test_fields_of_other_kinds_are_rejected(self):
        with pytest.raises(ValidationError):
            criteria_adapter.validate_python(
                {"type": "points-earned", "threshold": 10, "quiz_id": 4}
            )

    def test_reward_create_validates_limits_and_images(self):
        base = {"name": "Gold", "criteria": {"type": "points-earned", "threshold": 500}}
        with pytest.raises(ValidationError):
            RewardCreate(type=RewardType.POINTS, is_limited=True, **base)
        with pytest.raises(ValidationError):
            RewardCreate(type=RewardType.BADGE, **base)

        reward = RewardCreate(type=RewardType.POINTS, is_limited=True, limited_quantity=5, **base)
        assert isinstance(reward.criteria, PointsEarnedCriteria)
