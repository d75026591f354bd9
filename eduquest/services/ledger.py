"""
Gamification ledger

The only place that changes a learner's points, level, earned rewards and
activity log. Callers hold the learner lock and an open transaction.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from eduquest.core.logging import LoggerFactory
from eduquest.engine.levels import level_for_points
from eduquest.models import ActivityLogEntry, Reward, RewardAward, User
from eduquest.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class GamificationLedger:
    def __init__(self, db: Session):
        self.db = db
        self.audit_logger = LoggerFactory.get_audit_logger()

    def log_activity(self, user: User, activity: str) -> ActivityLogEntry:
        now = utcnow()
        entry = ActivityLogEntry(user_id=user.id, activity=activity, timestamp=now)
        user.activity_log.append(entry)
        user.last_activity = now
        return entry

    def credit_points(self, user: User, amount: int) -> bool:
        """
        Add points and apply level-up detection.

        Returns True when the learner reached a new level.
        """
        if amount < 0:
            raise ValueError("Points can only be credited, never debited")
        if amount == 0:
            return False

        user.points = (user.points or 0) + amount
        user.last_activity = utcnow()

        new_level = level_for_points(user.points)
        if new_level <= user.level:
            return False

        user.level = new_level
        self.log_activity(user, f"Leveled up to Level {new_level}!")
        self.audit_logger.info(
            "Learner leveled up",
            extra={"user_id": user.id, "level": new_level, "points": user.points},
        )
        return True

    def grant_reward(
        self,
        user: User,
        reward: Reward,
        reason: str,
        awarded_by: Optional[int] = None,
        activity: Optional[str] = None,
    ) -> RewardAward:
        """Record the award on both sides, log it and credit the reward's value"""
        award = RewardAward(
            user_id=user.id,
            awarded_by=awarded_by,
            awarded_at=utcnow(),
            reason=reason,
        )
        reward.awarded_to.append(award)
        reward.awarded_count = (reward.awarded_count or 0) + 1
        user.rewards.append(reward)

        self.log_activity(
            user, activity or f'Earned the "{reward.name}" {reward.reward_type.value}!'
        )

        if reward.value and reward.value > 0:
            self.credit_points(user, reward.value)

        self.audit_logger.info(
            "Reward awarded",
            extra={
                "user_id": user.id,
                "reward_id": reward.id,
                "reward_name": reward.name,
                "reason": reason,
                "awarded_by": awarded_by,
            },
        )
        return award
