"""
Course endpoints
Enrollment, lesson progress and unit/lesson edits
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eduquest.core.database import get_db
from eduquest.core.security import get_current_active_user, require_teacher
from eduquest.models import User
from eduquest.schemas.courses import (
    CourseProgressResponse,
    EnrollmentResponse,
    LessonCreate,
    LessonProgressResponse,
    LessonProgressUpdate,
    LessonResponse,
    UnitCreate,
    UnitResponse,
)
from eduquest.schemas.rewards import RewardResponse
from eduquest.services.courses import CourseService
from eduquest.services.progress import ProgressService

router = APIRouter()


@router.post(
    "/{course_id}/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED
)
def enroll_in_course(
    course_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return CourseService(db).enroll(current_user, course_id)


@router.post("/{course_id}/progress", response_model=LessonProgressResponse)
def update_lesson_progress(
    course_id: int,
    update: LessonProgressUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Mark a lesson completed (or not) and re-evaluate progress and rewards"""
    result = ProgressService(db).update_lesson_progress(
        current_user, course_id, update.lesson_id, update.completed
    )
    result["rewards_awarded"] = [
        RewardResponse.model_validate(reward) for reward in result["rewards_awarded"]
    ]
    return LessonProgressResponse(**result)


@router.get("/{course_id}/progress", response_model=CourseProgressResponse)
def get_course_progress(
    course_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return ProgressService(db).get_progress(current_user, course_id)


@router.post(
    "/{course_id}/units", response_model=UnitResponse, status_code=status.HTTP_201_CREATED
)
def add_unit(
    course_id: int,
    unit: UnitCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return CourseService(db).add_unit(course_id, unit.title, unit.description)


@router.post(
    "/{course_id}/units/{unit_index}/lessons",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_lesson(
    course_id: int,
    unit_index: int,
    lesson: LessonCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return CourseService(db).add_lesson(
        course_id, unit_index, lesson.title, lesson.content, lesson.duration
    )


@router.get(
    "/{course_id}/units/{unit_index}/lessons/{lesson_index}", response_model=LessonResponse
)
def get_lesson(
    course_id: int,
    unit_index: int,
    lesson_index: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return CourseService(db).get_lesson(course_id, unit_index, lesson_index)
