"""Attempt schemas"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from eduquest.models.quiz import Difficulty, NextAction
from eduquest.schemas.questions import SanitizedQuestion
from eduquest.schemas.rewards import RewardResponse


class StartAttemptRequest(BaseModel):
    quiz_id: int


class StartAttemptResponse(BaseModel):
    attempt_id: int
    quiz_id: int
    course_id: Optional[int]
    start_time: datetime
    duration: int
    starting_difficulty: Optional[Difficulty]
    questions: List[SanitizedQuestion]


class AnswerSubmission(BaseModel):
    question_id: str
    selected_answer: Any = None
    time_spent: int = Field(0, ge=0)

    @field_validator("question_id", mode="before")
    @classmethod
    def coerce_question_id(cls, v):
        return str(v)


class SubmitAttemptRequest(BaseModel):
    answers: List[AnswerSubmission] = Field(default_factory=list)


class SubmitAttemptResponse(BaseModel):
    attempt_id: int
    score: float
    total_possible_score: float
    percentage_score: float
    passed: bool
    feedback: Optional[str]
    next_action: Optional[NextAction]
    time_spent: int
    points_awarded: int
    rewards_awarded: List[RewardResponse]


class AttemptAnswerResponse(BaseModel):
    question_id: str
    selected_answer: Any
    is_correct: bool
    points_earned: float
    time_spent: int

    class Config:
        from_attributes = True


class AttemptResponse(BaseModel):
    id: int
    user_id: int
    quiz_id: int
    course_id: Optional[int]
    score: float
    total_possible_score: float
    percentage_score: float
    passed: bool
    start_time: datetime
    end_time: Optional[datetime]
    time_spent: int
    is_completed: bool
    feedback: Optional[str]
    next_action: Optional[NextAction]
    attempts_count: int
    points_awarded: int
    starting_difficulty: Optional[Difficulty]
    ending_difficulty: Optional[Difficulty]
    answers: List[AttemptAnswerResponse]

    class Config:
        from_attributes = True


class QuizAttemptStatistics(BaseModel):
    total_attempts: int
    passed_attempts: int
    passing_rate: float
    average_score: float
    average_time_spent: float


class QuizAttemptsResponse(BaseModel):
    statistics: QuizAttemptStatistics
    attempts: List[AttemptResponse]
