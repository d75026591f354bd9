"""
Attempt service

Starting an attempt picks the difficulty, assembles and freezes the question
set. Submitting grades against that frozen set, then updates progress,
points and rewards, all in one transaction.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from eduquest.core.config import settings
from eduquest.core.database import transaction
from eduquest.core.exceptions import (
    AttemptAlreadyCompletedException,
    AttemptLimitReachedException,
    AttemptOwnershipException,
    NotEnrolledException,
    NotFoundException,
    QuizInactiveException,
)
from eduquest.core.locks import learner_lock
from eduquest.core.logging import LoggerFactory, log_execution_time
from eduquest.engine.adaptive import PriorOutcome, select_starting_difficulty
from eduquest.engine.assembler import assemble_question_set, sanitize_question_set
from eduquest.engine.rewards import RewardContext
from eduquest.engine.scoring import ScoringRange, aggregate_score
from eduquest.models import Attempt, AttemptAnswer, Course, Difficulty, Quiz, Reward, User, UserRole
from eduquest.schemas.attempts import AnswerSubmission
from eduquest.schemas.questions import (
    SanitizedQuestion,
    dump_snapshot,
    load_snapshot,
    question_variant_from_model,
)
from eduquest.services.ledger import GamificationLedger
from eduquest.services.progress import ProgressService
from eduquest.services.rewards import RewardService
from eduquest.utils.timeutils import round_half_up, utcnow

logger = logging.getLogger(__name__)


class AttemptService:
    def __init__(self, db: Session):
        self.db = db

    def _get_quiz(self, quiz_id: int) -> Quiz:
        quiz = self.db.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundException("Quiz")
        return quiz

    def _attempts_query(self, user_id: int, quiz_id: int):
        return self.db.query(Attempt).filter(Attempt.user_id == user_id, Attempt.quiz_id == quiz_id)

    def last_completed_attempt(self, user_id: int, quiz_id: int) -> Optional[Attempt]:
        return (
            self._attempts_query(user_id, quiz_id)
            .filter(Attempt.is_completed.is_(True))
            .order_by(Attempt.start_time.desc(), Attempt.id.desc())
            .first()
        )

    @log_execution_time(logger)
    def start_attempt(self, user: User, quiz_id: int) -> Tuple[Attempt, List[SanitizedQuestion]]:
        quiz = self._get_quiz(quiz_id)

        if not quiz.is_active:
            raise QuizInactiveException(details={"quiz_id": quiz.id})

        if (
            user.role == UserRole.STUDENT
            and quiz.course_id is not None
            and user.enrollment_for(quiz.course_id) is None
        ):
            raise NotEnrolledException(details={"course_id": quiz.course_id})

        if quiz.max_attempts > 0:
            completed_count = (
                self._attempts_query(user.id, quiz.id).filter(Attempt.is_completed.is_(True)).count()
            )
            if completed_count >= quiz.max_attempts:
                raise AttemptLimitReachedException(quiz.max_attempts)

        # Only students get a tier personalized from history and preferences
        personalize = quiz.is_adaptive and user.role == UserRole.STUDENT
        last = self.last_completed_attempt(user.id, quiz.id) if personalize else None
        difficulty = select_starting_difficulty(
            configured=quiz.difficulty,
            is_adaptive=quiz.is_adaptive,
            preferred=user.difficulty_preference if personalize else None,
            last_attempt=(
                PriorOutcome(last.passed, last.percentage_score, last.ending_difficulty)
                if last
                else None
            ),
        )

        bank = [question_variant_from_model(question) for question in quiz.questions]
        questions = assemble_question_set(
            bank, difficulty, quiz.is_adaptive, quiz.is_random_order
        )

        attempt = Attempt(
            user_id=user.id,
            quiz_id=quiz.id,
            course_id=quiz.course_id,
            start_time=utcnow(),
            total_possible_score=sum(question.points for question in questions),
            attempts_count=self._attempts_query(user.id, quiz.id).count() + 1,
            question_snapshot=dump_snapshot(questions),
        )
        if quiz.is_adaptive:
            attempt.starting_difficulty = difficulty
            attempt.ending_difficulty = difficulty
            attempt.difficulty_adjustments = []

        with transaction(self.db, "start_attempt"):
            self.db.add(attempt)

        logger.info(
            f"Attempt {attempt.id} started",
            extra={
                "attempt_id": attempt.id,
                "user_id": user.id,
                "quiz_id": quiz.id,
                "difficulty": difficulty.value,
                "question_count": len(questions),
            },
        )
        return attempt, sanitize_question_set(questions)

    @log_execution_time(logger)
    def submit_attempt(
        self, user: User, attempt_id: int, answers: Sequence[AnswerSubmission]
    ) -> Tuple[Attempt, List[Reward]]:
        attempt = self.db.get(Attempt, attempt_id)
        if not attempt:
            raise NotFoundException("Attempt")

        if attempt.user_id != user.id:
            raise AttemptOwnershipException(details={"attempt_id": attempt.id})

        with learner_lock(user.id):
            # Another request may have completed it or changed the learner while we waited
            self.db.refresh(attempt)
            self.db.refresh(user)
            if attempt.is_completed:
                raise AttemptAlreadyCompletedException(details={"attempt_id": attempt.id})

            quiz = self._get_quiz(attempt.quiz_id)
            ranges = None
            if quiz.is_adaptive and quiz.adaptive_rules:
                ranges = [
                    ScoringRange(
                        min_score=rule.min_score,
                        max_score=rule.max_score,
                        feedback=rule.feedback_template,
                        next_action=rule.next_action,
                    )
                    for rule in quiz.adaptive_rules
                ]

            summary = aggregate_score(
                load_snapshot(attempt.question_snapshot), answers, quiz.passing_score, ranges
            )

            rewards: List[Reward] = []
            with transaction(self.db, "submit_attempt"):
                now = utcnow()
                attempt.answers = [
                    AttemptAnswer(
                        question_id=graded.question_id,
                        selected_answer=graded.selected_answer,
                        is_correct=graded.is_correct,
                        points_earned=graded.points_earned,
                        time_spent=graded.time_spent,
                    )
                    for graded in summary.answers
                ]
                attempt.score = summary.score
                attempt.percentage_score = summary.percentage
                attempt.passed = summary.passed
                attempt.feedback = summary.feedback
                attempt.next_action = summary.next_action
                attempt.end_time = now
                attempt.time_spent = max(int((now - attempt.start_time).total_seconds()), 0)
                attempt.is_completed = True
                if quiz.is_adaptive:
                    attempt.ending_difficulty = attempt.starting_difficulty

                if user.role == UserRole.STUDENT:
                    rewards = self._apply_gamification(user, quiz, attempt)
                    attempt.rewards_awarded = rewards

        LoggerFactory.get_audit_logger().info(
            "Attempt completed",
            extra={
                "attempt_id": attempt.id,
                "user_id": user.id,
                "quiz_id": quiz.id,
                "score": attempt.score,
                "percentage": attempt.percentage_score,
                "passed": attempt.passed,
                "points_awarded": attempt.points_awarded,
            },
        )
        return attempt, rewards

    def _apply_gamification(self, user: User, quiz: Quiz, attempt: Attempt) -> List[Reward]:
        ledger = GamificationLedger(self.db)

        if attempt.passed:
            points = settings.get_quiz_pass_points(Difficulty(quiz.difficulty).value)
            ledger.credit_points(user, points)
            attempt.points_awarded = points
            ledger.log_activity(
                user,
                f'Completed quiz "{quiz.title}" with score '
                f"{round_half_up(attempt.percentage_score)}% and earned {points} points",
            )

        course: Optional[Course] = None
        progress = None
        just_completed = False
        if attempt.course_id is not None:
            course = self.db.get(Course, attempt.course_id)
            enrollment = user.enrollment_for(attempt.course_id)
            if course is not None and enrollment is not None:
                snapshot, just_completed = ProgressService(self.db).recompute(
                    user, course, enrollment
                )
                progress = snapshot.percentage

        context = RewardContext(
            user_id=user.id,
            points=user.points,
            percentage=attempt.percentage_score,
            passed=attempt.passed,
            attempts_count=attempt.attempts_count,
            progress=progress,
            course_completed=progress == 100,
            quiz_title=quiz.title,
            course_title=course.title if course else None,
        )
        reward_service = RewardService(self.db)
        rewards = reward_service.evaluate_and_award(
            user, context, quiz=quiz, course=course, course_just_completed=just_completed
        )
        attempt.points_awarded = (attempt.points_awarded or 0) + reward_service.points_credited(
            rewards
        )
        return rewards

    def list_attempts(
        self, user: User, course_id: Optional[int] = None, quiz_id: Optional[int] = None
    ) -> List[Attempt]:
        query = self.db.query(Attempt).filter(Attempt.user_id == user.id)
        if course_id is not None:
            query = query.filter(Attempt.course_id == course_id)
        if quiz_id is not None:
            query = query.filter(Attempt.quiz_id == quiz_id)
        return query.order_by(Attempt.start_time.desc(), Attempt.id.desc()).all()

    def get_attempt(self, user: User, attempt_id: int) -> Attempt:
        attempt = self.db.get(Attempt, attempt_id)
        if not attempt:
            raise NotFoundException("Attempt")

        if attempt.user_id == user.id or user.role == UserRole.ADMIN:
            return attempt
        if attempt.course is not None and attempt.course.created_by == user.id:
            return attempt

        raise AttemptOwnershipException(details={"attempt_id": attempt.id})

    def quiz_statistics(self, quiz_id: int) -> dict:
        quiz = self._get_quiz(quiz_id)
        attempts = (
            self.db.query(Attempt)
            .filter(Attempt.quiz_id == quiz.id, Attempt.is_completed.is_(True))
            .order_by(Attempt.end_time.desc(), Attempt.id.desc())
            .all()
        )

        total = len(attempts)
        passed = sum(1 for attempt in attempts if attempt.passed)
        statistics = {
            "total_attempts": total,
            "passed_attempts": passed,
            "passing_rate": 100.0 * passed / total if total else 0.0,
            "average_score": sum(a.percentage_score for a in attempts) / total if total else 0.0,
            "average_time_spent": sum(a.time_spent for a in attempts) / total if total else 0.0,
        }
        return {"statistics": statistics, "attempts": attempts}
