"""Course service: enrollment and unit/lesson edits"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from eduquest.core.database import transaction
from eduquest.core.exceptions import AlreadyEnrolledException, NotFoundException
from eduquest.core.locks import learner_lock
from eduquest.models import Course, CourseUnit, Enrollment, Lesson, User
from eduquest.services.ledger import GamificationLedger
from eduquest.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    def get_course(self, course_id: int) -> Course:
        course = self.db.get(Course, course_id)
        if not course:
            raise NotFoundException("Course")
        return course

    def enroll(self, user: User, course_id: int) -> Enrollment:
        course = self.get_course(course_id)

        with learner_lock(user.id), transaction(self.db, "enroll"):
            self.db.refresh(user)
            if user.enrollment_for(course.id) is not None:
                raise AlreadyEnrolledException(details={"course_id": course.id})

            enrollment = Enrollment(course_id=course.id, enrolled_at=utcnow())
            user.enrollments.append(enrollment)
            GamificationLedger(self.db).log_activity(user, f"Enrolled in course: {course.title}")

        logger.info(
            f"User {user.id} enrolled in course {course.id}",
            extra={"user_id": user.id, "course_id": course.id},
        )
        return enrollment

    def add_unit(
        self, course_id: int, title: str, description: Optional[str] = None
    ) -> CourseUnit:
        course = self.get_course(course_id)
        with transaction(self.db, "add_unit"):
            unit = course.add_unit(title, description)
        return unit

    def add_lesson(
        self, course_id: int, unit_index: int, title: str, content: str = "", duration: int = 15
    ) -> Lesson:
        course = self.get_course(course_id)
        if not 0 <= unit_index < len(course.units):
            raise NotFoundException("Unit")

        with transaction(self.db, "add_lesson"):
            lesson = course.add_lesson(unit_index, title, content, duration)
        return lesson

    def get_lesson(self, course_id: int, unit_index: int, lesson_index: int) -> Lesson:
        course = self.get_course(course_id)
        try:
            if unit_index < 0 or lesson_index < 0:
                raise IndexError(lesson_index)
            return course.get_lesson(unit_index, lesson_index)
        except IndexError as e:
            raise NotFoundException("Lesson") from e
