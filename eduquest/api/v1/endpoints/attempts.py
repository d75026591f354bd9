"""
Attempt endpoints
Start, submit and review quiz attempts
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eduquest.core.database import get_db
from eduquest.core.security import get_current_active_user, require_teacher
from eduquest.models import User
from eduquest.schemas.attempts import (
    AttemptResponse,
    QuizAttemptsResponse,
    StartAttemptRequest,
    StartAttemptResponse,
    SubmitAttemptRequest,
    SubmitAttemptResponse,
)
from eduquest.schemas.rewards import RewardResponse
from eduquest.services.attempts import AttemptService

router = APIRouter()


@router.post("/start", response_model=StartAttemptResponse, status_code=status.HTTP_201_CREATED)
def start_attempt(
    request: StartAttemptRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Start a new attempt and return the sanitized question set"""
    attempt, questions = AttemptService(db).start_attempt(current_user, request.quiz_id)
    return StartAttemptResponse(
        attempt_id=attempt.id,
        quiz_id=attempt.quiz_id,
        course_id=attempt.course_id,
        start_time=attempt.start_time,
        duration=attempt.quiz.duration,
        starting_difficulty=attempt.starting_difficulty,
        questions=questions,
    )


@router.post("/{attempt_id}/submit", response_model=SubmitAttemptResponse)
def submit_attempt(
    attempt_id: int,
    request: SubmitAttemptRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Grade an attempt and apply points, progress and rewards"""
    attempt, rewards = AttemptService(db).submit_attempt(current_user, attempt_id, request.answers)
    return SubmitAttemptResponse(
        attempt_id=attempt.id,
        score=attempt.score,
        total_possible_score=attempt.total_possible_score,
        percentage_score=attempt.percentage_score,
        passed=attempt.passed,
        feedback=attempt.feedback,
        next_action=attempt.next_action,
        time_spent=attempt.time_spent,
        points_awarded=attempt.points_awarded,
        rewards_awarded=[RewardResponse.model_validate(reward) for reward in rewards],
    )


@router.get("", response_model=List[AttemptResponse])
def list_attempts(
    course_id: Optional[int] = Query(None),
    quiz_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List the current user's attempts, newest first"""
    return AttemptService(db).list_attempts(current_user, course_id=course_id, quiz_id=quiz_id)


@router.get("/quiz/{quiz_id}", response_model=QuizAttemptsResponse)
def get_quiz_attempts(
    quiz_id: int,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Completed attempts for a quiz with aggregate statistics (teachers and admins only)"""
    return AttemptService(db).quiz_statistics(quiz_id)


@router.get("/{attempt_id}", response_model=AttemptResponse)
def get_attempt(
    attempt_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return AttemptService(db).get_attempt(current_user, attempt_id)
