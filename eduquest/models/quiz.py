"""
Quiz models for EduQuest
"""

import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduquest.core.database import Base
from eduquest.models.types import enum_column


class Difficulty(str, enum.Enum):
    """Difficulty tiers, easiest first"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionType(str, enum.Enum):
    """Question kinds understood by the grading engine"""
    SINGLE_SELECT = "single-select"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    MATCHING = "matching"


class NextAction(str, enum.Enum):
    """Recommended follow-up attached to an adaptive scoring range"""
    NEXT_LEVEL = "next-level"
    REPEAT = "repeat"
    EASIER_VERSION = "easier-version"
    HARDER_VERSION = "harder-version"


class Quiz(Base):
    """Quiz model"""
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)

    duration = Column(Integer, default=10, nullable=False)  # in minutes
    passing_score = Column(Float, default=60.0, nullable=False)  # percentage
    max_attempts = Column(Integer, default=-1, nullable=False)  # -1 means unlimited
    is_random_order = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    difficulty = Column(enum_column(Difficulty), default=Difficulty.MEDIUM, nullable=False)
    is_adaptive = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    # Relationships
    course = relationship("Course", back_populates="quizzes")
    questions = relationship(
        "Question",
        back_populates="quiz",
        order_by="Question.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    adaptive_rules = relationship(
        "AdaptiveRule",
        order_by="AdaptiveRule.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    @property
    def total_points(self) -> float:
        return sum(question.points for question in self.questions)

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title!r})>"


class Question(Base):
    """Question model"""
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    prompt = Column(Text, nullable=False)
    question_type = Column(enum_column(QuestionType), default=QuestionType.SINGLE_SELECT, nullable=False)
    points = Column(Float, default=1, nullable=False)
    difficulty = Column(enum_column(Difficulty), default=Difficulty.MEDIUM, nullable=False)

    # Canonical answer for non-select kinds: a string, a boolean or a structured list
    correct_answer = Column(JSON, nullable=True)
    explanation = Column(Text, nullable=True)

    image_url = Column(String(500), nullable=True)
    animation_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuestionOption",
        order_by="QuestionOption.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )


class QuestionOption(Base):
    """Selectable option of a single-select question"""
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("quiz_questions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    text = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    is_correct = Column(Boolean, default=False, nullable=False)


class AdaptiveRule(Base):
    """Scoring range mapped to feedback and a recommended next action"""
    __tablename__ = "quiz_adaptive_rules"

    id = Column(Integer, primary_key=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    min_score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False)
    next_action = Column(enum_column(NextAction), nullable=True)
    feedback_template = Column(Text, nullable=True)
