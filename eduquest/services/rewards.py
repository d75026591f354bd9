"""Reward service"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from eduquest.core.database import transaction
from eduquest.core.exceptions import NotFoundException, RewardUnavailableException
from eduquest.core.locks import learner_lock
from eduquest.engine.rewards import RewardContext, award_reason, decide_awards
from eduquest.models import Course, CriteriaType, Quiz, Reward, User
from eduquest.schemas.rewards import RewardCreate, criteria_columns
from eduquest.services.ledger import GamificationLedger
from eduquest.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class RewardService:
    def __init__(self, db: Session):
        self.db = db

    def _active(self, criteria_type: CriteriaType):
        return self.db.query(Reward).filter(
            Reward.is_active.is_(True), Reward.criteria_type == criteria_type
        )

    def quiz_score_candidates(self, quiz_id: int, percentage: float) -> List[Reward]:
        return (
            self._active(CriteriaType.QUIZ_SCORE)
            .filter(Reward.quiz_id == quiz_id, Reward.threshold <= percentage)
            .order_by(Reward.id)
            .all()
        )

    def course_completion_candidates(self, course_id: int, progress: int) -> List[Reward]:
        return (
            self._active(CriteriaType.COURSE_COMPLETION)
            .filter(Reward.course_id == course_id, Reward.threshold <= progress)
            .order_by(Reward.id)
            .all()
        )

    def points_earned_candidates(self, points: int) -> List[Reward]:
        return (
            self._active(CriteriaType.POINTS_EARNED)
            .filter(Reward.threshold <= points)
            .order_by(Reward.id)
            .all()
        )

    @staticmethod
    def custom_candidates(course: Course) -> List[Reward]:
        return [
            reward
            for reward in course.rewards_available
            if reward.is_active and reward.criteria_type == CriteriaType.CUSTOM
        ]

    def evaluate_and_award(
        self,
        user: User,
        context: RewardContext,
        quiz: Optional[Quiz] = None,
        course: Optional[Course] = None,
        course_just_completed: bool = False,
    ) -> List[Reward]:
        """
        Award every reward the learner has newly earned.

        Must run inside the caller's transaction and learner lock.
        """
        candidates: List[Reward] = []
        if quiz is not None and context.percentage is not None:
            candidates += self.quiz_score_candidates(quiz.id, context.percentage)
        if course is not None and course_just_completed:
            candidates += self.course_completion_candidates(course.id, context.progress or 0)
        candidates += self.points_earned_candidates(user.points)
        if course is not None:
            candidates += self.custom_candidates(course)

        ledger = GamificationLedger(self.db)
        chosen: List[Reward] = []
        now = utcnow()

        # Granted values can cross further points thresholds
        while candidates:
            held = {reward.id for reward in user.rewards}
            granted = decide_awards(candidates, held, context, now)
            if not granted:
                break
            for reward in granted:
                ledger.grant_reward(
                    user, reward, award_reason(reward.criteria, context, reward.name)
                )
            chosen += granted
            context.points = user.points
            candidates = self.points_earned_candidates(user.points)

        if chosen:
            logger.info(
                f"Awarded {len(chosen)} reward(s) to user {user.id}",
                extra={"user_id": user.id, "reward_ids": [r.id for r in chosen]},
            )
        return chosen

    @staticmethod
    def points_credited(rewards: List[Reward]) -> int:
        """Points the given awards credited through their value"""
        return sum(reward.value for reward in rewards if reward.value and reward.value > 0)

    def create_reward(self, reward_data: RewardCreate, creator: User) -> Reward:
        """Create a reward and list it in the relevant course's reward pool"""
        criteria = reward_data.criteria
        pool_course: Optional[Course] = None

        if criteria.type == CriteriaType.QUIZ_SCORE.value:
            quiz = self.db.get(Quiz, criteria.quiz_id)
            if not quiz:
                raise NotFoundException("Quiz")
            pool_course = quiz.course
        elif criteria.type == CriteriaType.COURSE_COMPLETION.value:
            pool_course = self.db.get(Course, criteria.course_id)
            if not pool_course:
                raise NotFoundException("Course")

        if reward_data.course_id is not None:
            pool_course = self.db.get(Course, reward_data.course_id)
            if not pool_course:
                raise NotFoundException("Course")

        reward = Reward(
            name=reward_data.name,
            description=reward_data.description,
            reward_type=reward_data.type,
            image_url=reward_data.image_url,
            value=reward_data.value,
            rarity=reward_data.rarity,
            category=reward_data.category,
            is_limited=reward_data.is_limited,
            limited_quantity=reward_data.limited_quantity,
            expires_at=reward_data.expires_at,
            is_active=reward_data.is_active,
            created_by=creator.id,
            **criteria_columns(criteria),
        )

        with transaction(self.db, "create_reward"):
            self.db.add(reward)
            if pool_course is not None:
                pool_course.rewards_available.append(reward)

        logger.info(f"Reward created: {reward.name}", extra={"reward_id": reward.id})
        return reward

    def award_reward_manually(
        self, reward_id: int, user_id: int, awarded_by: User, reason: Optional[str] = None
    ) -> Reward:
        reward = self.db.get(Reward, reward_id)
        if not reward:
            raise NotFoundException("Reward")

        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundException("User")

        with learner_lock(user.id), transaction(self.db, "award_reward"):
            self.db.refresh(user)
            self.db.refresh(reward)
            if not reward.is_active:
                raise RewardUnavailableException("This reward is not active")
            if reward.is_expired(utcnow()):
                raise RewardUnavailableException("This reward has expired")
            if reward.is_sold_out():
                raise RewardUnavailableException("This reward has reached its limit")
            if user.has_reward(reward.id):
                raise RewardUnavailableException("User already has this reward")

            GamificationLedger(self.db).grant_reward(
                user,
                reward,
                reason or f"Awarded by {awarded_by.name}",
                awarded_by=awarded_by.id,
                activity=f'Awarded the "{reward.name}" {reward.reward_type.value}',
            )

        return reward

    @staticmethod
    def get_user_rewards(user: User) -> dict:
        return {"rewards": list(user.rewards), "points": user.points, "level": user.level}
