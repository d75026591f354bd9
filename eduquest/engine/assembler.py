"""Question set assembly and sanitization"""

import random
from typing import List, Optional, Sequence

from eduquest.models.quiz import Difficulty
from eduquest.schemas.questions import (
    QuestionVariant,
    SanitizedOption,
    SanitizedQuestion,
    SingleSelectQuestion,
)

MIN_QUESTIONS_PER_TIER = 3

BACKFILL_TIER = {
    Difficulty.EASY: Difficulty.MEDIUM,
    Difficulty.HARD: Difficulty.MEDIUM,
    Difficulty.MEDIUM: Difficulty.EASY,
}


def assemble_question_set(
    bank: Sequence[QuestionVariant],
    difficulty: Difficulty,
    is_adaptive: bool,
    is_random_order: bool,
    rng: Optional[random.Random] = None,
) -> List[QuestionVariant]:
    """
    Build the question set for one attempt.

    Adaptive quizzes keep only the selected tier, topped up with the adjacent
    tier when fewer than three questions remain.
    """
    if is_adaptive:
        questions = [q for q in bank if q.difficulty == difficulty]
        if len(questions) < MIN_QUESTIONS_PER_TIER:
            backfill = BACKFILL_TIER[Difficulty(difficulty)]
            questions += [q for q in bank if q.difficulty == backfill]
    else:
        questions = list(bank)

    if is_random_order:
        (rng or random).shuffle(questions)

    return questions


def sanitize_question(question: QuestionVariant) -> SanitizedQuestion:
    options = None
    if isinstance(question, SingleSelectQuestion):
        options = [
            SanitizedOption(id=option.id, text=option.text, image_url=option.image_url)
            for option in question.options
        ]

    return SanitizedQuestion(
        id=question.id,
        kind=question.kind,
        prompt=question.prompt,
        points=question.points,
        difficulty=question.difficulty,
        image_url=question.image_url,
        options=options,
    )


def sanitize_question_set(questions: Sequence[QuestionVariant]) -> List[SanitizedQuestion]:
    return [sanitize_question(question) for question in questions]
