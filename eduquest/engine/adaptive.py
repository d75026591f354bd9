"""Adaptive difficulty selection for a new attempt"""

from dataclasses import dataclass
from typing import Optional

from eduquest.models.quiz import Difficulty

TIERS = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)

# A pass strictly above this percentage moves the learner up one tier
STEP_UP_PERCENTAGE = 85


@dataclass(frozen=True)
class PriorOutcome:
    """Outcome of the learner's most recent completed attempt on the quiz"""
    passed: bool
    percentage: float
    difficulty: Optional[Difficulty] = None  # tier that attempt was played at


def step_down(tier: Difficulty) -> Difficulty:
    return TIERS[max(TIERS.index(tier) - 1, 0)]


def step_up(tier: Difficulty) -> Difficulty:
    return TIERS[min(TIERS.index(tier) + 1, len(TIERS) - 1)]


def select_starting_difficulty(
    configured: Difficulty,
    is_adaptive: bool,
    preferred: Optional[Difficulty] = None,
    last_attempt: Optional[PriorOutcome] = None,
) -> Difficulty:
    """
    Pick the tier a new attempt starts at.

    Non-adaptive quizzes always use their configured tier. Adaptive quizzes
    start from the tier the last completed attempt was played at, else the
    learner's preference, else the configured tier, and move at most one step
    based on how that attempt went.
    """
    configured = Difficulty(configured)
    if not is_adaptive:
        return configured

    tier = Difficulty(preferred) if preferred else configured
    if last_attempt is None:
        return tier
    if last_attempt.difficulty:
        tier = Difficulty(last_attempt.difficulty)

    if not last_attempt.passed:
        return step_down(tier)
    if last_attempt.percentage > STEP_UP_PERCENTAGE:
        return step_up(tier)
    return tier
