"""
Question schemas

Each stored question is converted into a tagged variant carrying only the
fields its kind needs. The variants are what the grading engine and the
per-attempt question snapshot work with.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from eduquest.models.quiz import Difficulty, QuestionType


class OptionVariant(BaseModel):
    id: str
    text: Optional[str] = None
    image_url: Optional[str] = None
    is_correct: bool = False


class _QuestionBase(BaseModel):
    id: str
    prompt: str
    points: float = Field(1, ge=0)
    difficulty: Difficulty = Difficulty.MEDIUM
    image_url: Optional[str] = None
    explanation: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)


class SingleSelectQuestion(_QuestionBase):
    kind: Literal["single-select"] = "single-select"
    options: List[OptionVariant] = Field(..., min_length=1)


class TrueFalseQuestion(_QuestionBase):
    kind: Literal["true-false"] = "true-false"
    correct_answer: Union[bool, str]


class ShortAnswerQuestion(_QuestionBase):
    kind: Literal["short-answer"] = "short-answer"
    correct_answer: str = Field(..., min_length=1)


class MatchingQuestion(_QuestionBase):
    kind: Literal["matching"] = "matching"
    correct_answer: List[Any] = Field(..., min_length=1)


QuestionVariant = Annotated[
    Union[SingleSelectQuestion, TrueFalseQuestion, ShortAnswerQuestion, MatchingQuestion],
    Field(discriminator="kind"),
]

question_adapter = TypeAdapter(QuestionVariant)
question_list_adapter = TypeAdapter(List[QuestionVariant])


def question_variant_from_model(question) -> QuestionVariant:
    """Build the tagged variant for a stored Question row"""
    data = {
        "id": question.id,
        "kind": QuestionType(question.question_type).value,
        "prompt": question.prompt,
        "points": question.points,
        "difficulty": question.difficulty,
        "image_url": question.image_url,
        "explanation": question.explanation,
    }
    if question.question_type == QuestionType.SINGLE_SELECT:
        data["options"] = [
            {
                "id": str(option.id),
                "text": option.text,
                "image_url": option.image_url,
                "is_correct": option.is_correct,
            }
            for option in question.options
        ]
    else:
        data["correct_answer"] = question.correct_answer
    return question_adapter.validate_python(data)


def dump_snapshot(questions: List[QuestionVariant]) -> List[dict]:
    return question_list_adapter.dump_python(questions, mode="json")


def load_snapshot(snapshot: List[dict]) -> List[QuestionVariant]:
    return question_list_adapter.validate_python(snapshot)


class SanitizedOption(BaseModel):
    id: str
    text: Optional[str] = None
    image_url: Optional[str] = None


class SanitizedQuestion(BaseModel):
    """What a learner sees: no correctness flags, canonical answers or explanations"""
    id: str
    kind: str
    prompt: str
    points: float
    difficulty: Difficulty
    image_url: Optional[str] = None
    options: Optional[List[SanitizedOption]] = None
