"""
Score aggregation and feedback selection

Answers are graded against the question set frozen when the attempt
started, and the total is that set's point sum.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from eduquest.engine.grading import grade_answer
from eduquest.models.quiz import NextAction

MASTERY_FEEDBACK = "Excellent work! You've mastered this content."
GOOD_UNDERSTANDING_FEEDBACK = "Good job! You have a good understanding of the material."
PASSED_FEEDBACK = "You passed! Continue practicing to improve your score."
NEEDS_PRACTICE_FEEDBACK = "Keep practicing! Review the material and try again."


@dataclass(frozen=True)
class ScoringRange:
    min_score: float
    max_score: float
    feedback: Optional[str] = None
    next_action: Optional[NextAction] = None


@dataclass
class GradedAnswer:
    question_id: str
    selected_answer: Any
    is_correct: bool
    points_earned: float
    time_spent: int = 0


@dataclass
class ScoreSummary:
    score: float
    total_possible_score: float
    percentage: float
    passed: bool
    correct_count: int
    feedback: Optional[str]
    next_action: Optional[NextAction]
    answers: List[GradedAnswer] = field(default_factory=list)


def percentage_of(score: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return 100.0 * score / total


def select_feedback(
    percentage: float,
    passing_score: float,
    ranges: Optional[Sequence[ScoringRange]] = None,
) -> Tuple[Optional[str], Optional[NextAction]]:
    """First matching range wins; with no ranges configured the fixed ladder applies"""
    if ranges:
        for scoring_range in ranges:
            if scoring_range.min_score <= percentage <= scoring_range.max_score:
                return scoring_range.feedback, scoring_range.next_action
        return None, None

    if percentage >= 90:
        return MASTERY_FEEDBACK, None
    if percentage >= 70:
        return GOOD_UNDERSTANDING_FEEDBACK, None
    if percentage >= passing_score:
        return PASSED_FEEDBACK, None
    return NEEDS_PRACTICE_FEEDBACK, None


def aggregate_score(
    questions: Sequence,
    submissions: Iterable,
    passing_score: float,
    ranges: Optional[Sequence[ScoringRange]] = None,
) -> ScoreSummary:
    """
    Grade every submission and roll the results up.

    Submissions naming a question outside the set are skipped, as are repeat
    submissions for a question already graded.
    """
    by_id = {question.id: question for question in questions}
    total = sum(question.points for question in questions)

    graded: List[GradedAnswer] = []
    seen = set()
    for submission in submissions:
        question_id = str(submission.question_id)
        question = by_id.get(question_id)
        if question is None or question_id in seen:
            continue
        seen.add(question_id)

        result = grade_answer(question, submission.selected_answer)
        graded.append(
            GradedAnswer(
                question_id=question_id,
                selected_answer=submission.selected_answer,
                is_correct=result.is_correct,
                points_earned=result.points_earned,
                time_spent=getattr(submission, "time_spent", 0) or 0,
            )
        )

    score = sum(answer.points_earned for answer in graded)
    percentage = percentage_of(score, total)
    feedback, next_action = select_feedback(percentage, passing_score, ranges)

    return ScoreSummary(
        score=score,
        total_possible_score=total,
        percentage=percentage,
        passed=percentage >= passing_score,
        correct_count=sum(1 for answer in graded if answer.is_correct),
        feedback=feedback,
        next_action=next_action,
        answers=graded,
    )
