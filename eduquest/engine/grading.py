"""
Grading engine

Grades one submitted value against one question variant. Dispatch is by
variant type; a kind with no registered rule raises TypeError instead of
being graded incorrect.
"""

from dataclasses import dataclass
from functools import singledispatch
from typing import Any

from eduquest.schemas.questions import (
    MatchingQuestion,
    ShortAnswerQuestion,
    SingleSelectQuestion,
    TrueFalseQuestion,
)


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    points_earned: float


@singledispatch
def is_correct(question, submitted: Any) -> bool:
    raise TypeError(f"No grading rule registered for {type(question).__name__}")


@is_correct.register
def _(question: SingleSelectQuestion, submitted: Any) -> bool:
    if submitted is None:
        return False
    chosen = str(submitted)
    return any(option.is_correct and option.id == chosen for option in question.options)


def _normalize_boolean(value: Any) -> str:
    return str(value).strip().lower()


@is_correct.register
def _(question: TrueFalseQuestion, submitted: Any) -> bool:
    if submitted is None:
        return False
    return _normalize_boolean(submitted) == _normalize_boolean(question.correct_answer)


@is_correct.register
def _(question: ShortAnswerQuestion, submitted: Any) -> bool:
    if submitted is None:
        return False
    return str(submitted).strip().casefold() == question.correct_answer.strip().casefold()


def _canonical(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, dict):
        return {key: _canonical(item) for key, item in value.items()}
    return value


@is_correct.register
def _(question: MatchingQuestion, submitted: Any) -> bool:
    return _canonical(submitted) == _canonical(question.correct_answer)


def grade_answer(question, submitted: Any) -> GradeResult:
    """Return correctness and the points earned for one answer"""
    correct = is_correct(question, submitted)
    return GradeResult(is_correct=correct, points_earned=question.points if correct else 0)
