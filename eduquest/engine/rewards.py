"""
Reward eligibility

Candidates arrive already filtered by threshold. This module decides which
of them the learner actually receives and explains why.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import singledispatch
from typing import Callable, Dict, Iterable, List, Optional, Set

from eduquest.schemas.rewards import (
    CourseCompletionCriteria,
    CustomCriteria,
    PointsEarnedCriteria,
    QuizScoreCriteria,
)
from eduquest.utils.timeutils import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class RewardContext:
    """What the learner just did, as seen by criteria and custom rules"""
    user_id: int
    points: int
    percentage: Optional[float] = None
    passed: Optional[bool] = None
    attempts_count: Optional[int] = None
    progress: Optional[int] = None
    course_completed: bool = False
    quiz_title: Optional[str] = None
    course_title: Optional[str] = None


CustomRule = Callable[[RewardContext], bool]

CUSTOM_RULES: Dict[str, CustomRule] = {}


def custom_rule(name: str):
    """Register an evaluator for a free-form rule text"""

    def decorator(func: CustomRule) -> CustomRule:
        CUSTOM_RULES[name.strip().lower()] = func
        return func

    return decorator


@custom_rule("perfect-score")
def _perfect_score(context: RewardContext) -> bool:
    return context.percentage is not None and context.percentage >= 100


@custom_rule("first-attempt-pass")
def _first_attempt_pass(context: RewardContext) -> bool:
    return bool(context.passed) and context.attempts_count == 1


@custom_rule("course-completed")
def _course_completed(context: RewardContext) -> bool:
    return context.course_completed


def evaluate_custom_rule(rule: str, context: RewardContext) -> bool:
    """Unknown rules are never satisfied"""
    evaluator = CUSTOM_RULES.get(rule.strip().lower())
    if evaluator is None:
        logger.debug(f"No evaluator for custom reward rule {rule!r}")
        return False
    return bool(evaluator(context))


@singledispatch
def award_reason(criteria, context: RewardContext, reward_name: str) -> str:
    return f"Met the criteria for {reward_name}"


@award_reason.register
def _(criteria: PointsEarnedCriteria, context: RewardContext, reward_name: str) -> str:
    return f"Earned {context.points} points"


@award_reason.register
def _(criteria: CourseCompletionCriteria, context: RewardContext, reward_name: str) -> str:
    return f'Completed course "{context.course_title}" with {context.progress}% progress'


@award_reason.register
def _(criteria: QuizScoreCriteria, context: RewardContext, reward_name: str) -> str:
    return f'Scored {round_half_up(context.percentage or 0)}% on quiz "{context.quiz_title}"'


def decide_awards(
    candidates: Iterable,
    held_reward_ids: Set[int],
    context: RewardContext,
    now: datetime,
) -> List:
    """
    Pick the candidates to award, in candidate order.

    A reward already held, or picked earlier in this pass, is skipped, as is
    one that has expired or sold out. Custom rewards also need their rule to
    hold.
    """
    taken = set(held_reward_ids)
    chosen = []
    for reward in candidates:
        if reward.id in taken:
            continue
        if reward.is_expired(now) or reward.is_sold_out():
            continue

        criteria = reward.criteria
        if isinstance(criteria, CustomCriteria) and not evaluate_custom_rule(
            criteria.custom_rule, context
        ):
            continue

        taken.add(reward.id)
        chosen.append(reward)

    return chosen
