"""
User model for EduQuest
"""

import enum
from typing import Optional

from sqlalchemy import (
    BigInteger, Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Table,
    Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduquest.core.database import Base
from eduquest.models.quiz import Difficulty
from eduquest.models.types import enum_column


class UserRole(str, enum.Enum):
    """User roles"""
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class LearningStyle(str, enum.Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    READING = "reading"
    KINESTHETIC = "kinesthetic"


class LearningApproach(str, enum.Enum):
    TAILORED = "tailored"
    NON_TAILORED = "non-tailored"


user_rewards = Table(
    "user_rewards",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("reward_id", Integer, ForeignKey("rewards.id"), primary_key=True),
)


class User(Base):
    """User model with gamification state"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    role = Column(enum_column(UserRole), default=UserRole.STUDENT, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Gamification
    points = Column(BigInteger, default=0, nullable=False, index=True)
    level = Column(Integer, default=1, nullable=False)

    # Preferences
    difficulty_preference = Column(enum_column(Difficulty), nullable=True)
    learning_style = Column(enum_column(LearningStyle), default=LearningStyle.VISUAL)
    learning_approach = Column(enum_column(LearningApproach), default=LearningApproach.TAILORED)

    # Optimistic concurrency counter
    version_id = Column(Integer, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    last_activity = Column(DateTime, nullable=True)

    # Relationships
    rewards = relationship("Reward", secondary=user_rewards)
    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")
    activity_log = relationship(
        "ActivityLogEntry",
        order_by="ActivityLogEntry.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}
    __table_args__ = (
        CheckConstraint("points >= 0", name="check_points_positive"),
        CheckConstraint("level >= 1", name="check_level_positive"),
    )

    def enrollment_for(self, course_id: int) -> Optional["Enrollment"]:
        return next((e for e in self.enrollments if e.course_id == course_id), None)

    def has_reward(self, reward_id: int) -> bool:
        return any(reward.id == reward_id for reward in self.rewards)

    def __repr__(self):
        return f"<User(id={self.id}, points={self.points}, level={self.level})>"


class Enrollment(Base):
    """A learner's enrollment and progress in one course"""
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    progress = Column(Integer, default=0, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    enrolled_at = Column(DateTime, server_default=func.now())
    last_activity_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
    )


class ActivityLogEntry(Base):
    """Append-only learner activity feed"""
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    activity = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False)
