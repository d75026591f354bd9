"""
Attempt models for EduQuest
"""

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduquest.core.database import Base
from eduquest.models.quiz import Difficulty, NextAction
from eduquest.models.types import enum_column

attempt_rewards = Table(
    "attempt_rewards",
    Base.metadata,
    Column("attempt_id", Integer, ForeignKey("attempts.id"), primary_key=True),
    Column("reward_id", Integer, ForeignKey("rewards.id"), primary_key=True),
)


class Attempt(Base):
    """One learner's attempt at one quiz"""
    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)

    score = Column(Float, default=0, nullable=False)
    total_possible_score = Column(Float, nullable=False)
    percentage_score = Column(Float, default=0, nullable=False)
    passed = Column(Boolean, default=False, nullable=False)

    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    time_spent = Column(Integer, default=0, nullable=False)  # seconds
    is_completed = Column(Boolean, default=False, nullable=False, index=True)

    feedback = Column(Text, nullable=True)
    next_action = Column(enum_column(NextAction), nullable=True)
    attempts_count = Column(Integer, default=1, nullable=False)
    points_awarded = Column(Integer, default=0, nullable=False)

    # Adaptive difficulty record, only for adaptive quizzes
    starting_difficulty = Column(enum_column(Difficulty), nullable=True)
    ending_difficulty = Column(enum_column(Difficulty), nullable=True)
    difficulty_adjustments = Column(JSON, nullable=True)

    # Question set frozen at start; grading never reads the live quiz
    question_snapshot = Column(JSON, nullable=False)

    # Optimistic concurrency counter
    version_id = Column(Integer, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    quiz = relationship("Quiz")
    course = relationship("Course")
    answers = relationship(
        "AttemptAnswer",
        order_by="AttemptAnswer.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    rewards_awarded = relationship("Reward", secondary=attempt_rewards)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return (
            f"<Attempt(id={self.id}, user_id={self.user_id}, quiz_id={self.quiz_id}, "
            f"completed={self.is_completed})>"
        )


class AttemptAnswer(Base):
    """Graded result for one question of an attempt"""
    __tablename__ = "attempt_answers"

    id = Column(Integer, primary_key=True)
    attempt_id = Column(Integer, ForeignKey("attempts.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    question_id = Column(String(64), nullable=False)
    selected_answer = Column(JSON, nullable=True)
    is_correct = Column(Boolean, default=False, nullable=False)
    points_earned = Column(Float, default=0, nullable=False)
    time_spent = Column(Integer, default=0, nullable=False)  # seconds
