"""
Course models for EduQuest

A course is an aggregate of units and lessons addressed by position, so
edits target a single sub-entity instead of replacing the whole document.
Lesson completion is recorded per learner.
"""

from typing import Iterator, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Text, UniqueConstraint
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduquest.core.database import Base

course_rewards = Table(
    "course_rewards",
    Base.metadata,
    Column("course_id", Integer, ForeignKey("courses.id"), primary_key=True),
    Column("reward_id", Integer, ForeignKey("rewards.id"), primary_key=True),
)


class Course(Base):
    """Course model"""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    subject = Column(String(50), nullable=True)
    grade = Column(Integer, nullable=True)
    level = Column(String(20), default="beginner")
    is_published = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    points_to_earn = Column(Integer, default=100)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    # Relationships
    units = relationship(
        "CourseUnit",
        back_populates="course",
        order_by="CourseUnit.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    quizzes = relationship("Quiz", back_populates="course")
    rewards_available = relationship("Reward", secondary=course_rewards)

    @property
    def lessons(self) -> Iterator["Lesson"]:
        for unit in self.units:
            yield from unit.lessons

    @property
    def total_lessons(self) -> int:
        return sum(len(unit.lessons) for unit in self.units)

    def add_unit(self, title: str, description: Optional[str] = None) -> "CourseUnit":
        unit = CourseUnit(title=title, description=description)
        self.units.append(unit)
        return unit

    def add_lesson(
        self, unit_index: int, title: str, content: str = "", duration: int = 15
    ) -> "Lesson":
        lesson = Lesson(title=title, content=content, duration=duration)
        self.units[unit_index].lessons.append(lesson)
        return lesson

    def get_lesson(self, unit_index: int, lesson_index: int) -> "Lesson":
        return self.units[unit_index].lessons[lesson_index]

    def find_lesson(self, lesson_id: int) -> Optional["Lesson"]:
        return next((lesson for lesson in self.lessons if lesson.id == lesson_id), None)

    def __repr__(self):
        return f"<Course(id={self.id}, title={self.title!r})>"


class CourseUnit(Base):
    """Ordered unit within a course"""
    __tablename__ = "course_units"

    id = Column(Integer, primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    course = relationship("Course", back_populates="units")
    lessons = relationship(
        "Lesson",
        back_populates="unit",
        order_by="Lesson.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )


class Lesson(Base):
    """Ordered lesson within a unit"""
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True)
    unit_id = Column(Integer, ForeignKey("course_units.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False, default="")
    duration = Column(Integer, default=15)  # in minutes

    unit = relationship("CourseUnit", back_populates="lessons")


class LessonCompletion(Base):
    """One learner's completion of one lesson"""
    __tablename__ = "lesson_completions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    completed_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_completion_user_lesson"),
    )
