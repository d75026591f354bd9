"""Integration tests for enrollment and course structure edits"""

import pytest

from eduquest.core.exceptions import AlreadyEnrolledException, NotFoundException
from eduquest.services.courses import CourseService


@pytest.fixture
def service(db_session):
    return CourseService(db_session)


def test_enroll_creates_enrollment_and_logs_activity(service, factory, student):
    course = factory.course()
    enrollment = service.enroll(student, course.id)

    assert enrollment.id is not None
    assert enrollment.progress == 0
    assert enrollment.is_completed is False
    assert student.enrollment_for(course.id) is enrollment
    assert student.activity_log[-1].activity == "Enrolled in course: Algebra Basics"
    assert student.last_activity is not None


def test_duplicate_enrollment_rejected(service, factory, student):
    course = factory.course()
    service.enroll(student, course.id)
    with pytest.raises(AlreadyEnrolledException):
        service.enroll(student, course.id)
    assert len(student.enrollments) == 1


def test_enroll_unknown_course(service, student):
    with pytest.raises(NotFoundException):
        service.enroll(student, 404)


def test_units_and_lessons_keep_their_order(service, factory):
    course = factory.course(lessons_per_unit=())

    service.add_unit(course.id, "Fractions", "Halves and quarters")
    service.add_unit(course.id, "Decimals")
    service.add_lesson(course.id, 1, "Tenths")
    service.add_lesson(course.id, 0, "Halves")
    service.add_lesson(course.id, 0, "Quarters", content="1/4", duration=20)

    assert [unit.title for unit in course.units] == ["Fractions", "Decimals"]
    assert [unit.position for unit in course.units] == [0, 1]
    assert [lesson.title for lesson in course.lessons] == ["Halves", "Quarters", "Tenths"]
    assert course.total_lessons == 3

    lesson = service.get_lesson(course.id, 0, 1)
    assert lesson.title == "Quarters"
    assert lesson.position == 1
    assert lesson.duration == 20


def test_add_lesson_to_missing_unit(service, factory):
    course = factory.course(lessons_per_unit=(1,))
    with pytest.raises(NotFoundException):
        service.add_lesson(course.id, 3, "Nowhere")


@pytest.mark.parametrize("unit_index,lesson_index", [(0, 5), (2, 0), (-1, 0), (0, -1)])
def test_get_lesson_out_of_range(service, factory, unit_index, lesson_index):
    course = factory.course(lessons_per_unit=(2,))
    with pytest.raises(NotFoundException):
        service.get_lesson(course.id, unit_index, lesson_index)
