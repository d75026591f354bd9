"""
Progress service

Lesson completion is recorded per learner; the enrollment's progress is
recomputed from those records after every change.
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from eduquest.core.config import settings
from eduquest.core.database import transaction
from eduquest.core.exceptions import NotEnrolledException, NotFoundException
from eduquest.core.locks import learner_lock
from eduquest.engine.progress import ProgressSnapshot, compute_progress
from eduquest.engine.rewards import RewardContext
from eduquest.models import Course, Enrollment, LessonCompletion, User, UserRole
from eduquest.services.ledger import GamificationLedger
from eduquest.services.rewards import RewardService
from eduquest.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class ProgressService:
    def __init__(self, db: Session):
        self.db = db

    def _get_course(self, course_id: int) -> Course:
        course = self.db.get(Course, course_id)
        if not course:
            raise NotFoundException("Course")
        return course

    @staticmethod
    def _get_enrollment(user: User, course: Course) -> Enrollment:
        enrollment = user.enrollment_for(course.id)
        if enrollment is None:
            raise NotEnrolledException(details={"course_id": course.id})
        return enrollment

    def completed_lesson_ids(self, user_id: int, course: Course) -> List[int]:
        lesson_ids = [lesson.id for lesson in course.lessons]
        if not lesson_ids:
            return []

        rows = (
            self.db.query(LessonCompletion.lesson_id)
            .filter(
                LessonCompletion.user_id == user_id,
                LessonCompletion.lesson_id.in_(lesson_ids),
            )
            .all()
        )
        completed = {row.lesson_id for row in rows}
        return [lesson_id for lesson_id in lesson_ids if lesson_id in completed]

    def recompute(
        self, user: User, course: Course, enrollment: Enrollment
    ) -> Tuple[ProgressSnapshot, bool]:
        """Refresh the enrollment; the flag is True when this call completed the course"""
        completed = self.completed_lesson_ids(user.id, course)
        snapshot = compute_progress(len(completed), course.total_lessons)

        was_completed = enrollment.is_completed
        enrollment.progress = snapshot.percentage
        enrollment.is_completed = snapshot.is_completed
        enrollment.last_activity_at = utcnow()

        return snapshot, snapshot.is_completed and not was_completed

    def update_lesson_progress(
        self, user: User, course_id: int, lesson_id: int, completed: bool = True
    ) -> dict:
        course = self._get_course(course_id)
        self._get_enrollment(user, course)
        lesson = course.find_lesson(lesson_id)
        if lesson is None:
            raise NotFoundException("Lesson")

        points_awarded = 0
        rewards = []

        with learner_lock(user.id), transaction(self.db, "update_lesson_progress"):
            self.db.refresh(user)
            enrollment = self._get_enrollment(user, course)
            existing = (
                self.db.query(LessonCompletion)
                .filter(
                    LessonCompletion.user_id == user.id,
                    LessonCompletion.lesson_id == lesson.id,
                )
                .first()
            )

            ledger = GamificationLedger(self.db)
            is_student = user.role == UserRole.STUDENT

            if completed and existing is None:
                self.db.add(
                    LessonCompletion(user_id=user.id, lesson_id=lesson.id, completed_at=utcnow())
                )
                self.db.flush()
                if is_student and settings.LESSON_COMPLETION_POINTS > 0:
                    points_awarded = settings.LESSON_COMPLETION_POINTS
                    ledger.credit_points(user, points_awarded)
                    ledger.log_activity(
                        user,
                        f'Completed a lesson in "{course.title}" and earned {points_awarded} points',
                    )
            elif not completed and existing is not None:
                self.db.delete(existing)
                self.db.flush()

            snapshot, just_completed = self.recompute(user, course, enrollment)

            if is_student:
                context = RewardContext(
                    user_id=user.id,
                    points=user.points,
                    progress=snapshot.percentage,
                    course_completed=snapshot.is_completed,
                    course_title=course.title,
                )
                reward_service = RewardService(self.db)
                rewards = reward_service.evaluate_and_award(
                    user, context, course=course, course_just_completed=just_completed
                )
                points_awarded += reward_service.points_credited(rewards)

        logger.info(
            f"Lesson progress updated for user {user.id}",
            extra={
                "user_id": user.id,
                "course_id": course.id,
                "lesson_id": lesson.id,
                "completed": completed,
                "progress": snapshot.percentage,
            },
        )

        return {
            **self._progress_payload(user, course, snapshot),
            "points_awarded": points_awarded,
            "rewards_awarded": rewards,
        }

    def get_progress(self, user: User, course_id: int) -> dict:
        course = self._get_course(course_id)
        self._get_enrollment(user, course)
        completed = self.completed_lesson_ids(user.id, course)
        snapshot = compute_progress(len(completed), course.total_lessons)
        return self._progress_payload(user, course, snapshot, completed)

    def _progress_payload(
        self, user: User, course: Course, snapshot: ProgressSnapshot, completed=None
    ) -> dict:
        if completed is None:
            completed = self.completed_lesson_ids(user.id, course)
        return {
            "course_id": course.id,
            "completed_lessons": completed,
            "progress_percentage": snapshot.percentage,
            "is_completed": snapshot.is_completed,
            "total_lessons": snapshot.total_lessons,
            "points": user.points,
            "level": user.level,
        }
