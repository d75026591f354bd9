"""Tests for the grading engine."""

import pytest
from pydantic import ValidationError

from eduquest.engine.grading import grade_answer, is_correct
from eduquest.schemas.questions import (
    MatchingQuestion,
    ShortAnswerQuestion,
    SingleSelectQuestion,
    TrueFalseQuestion,
    question_adapter,
)


@pytest.fixture
def single_select():
    return SingleSelectQuestion(
        id="q1",
        prompt="2 + 2?",
        points=10,
        options=[
            {"id": "a", "text": "3"},
            {"id": "b", "text": "4", "is_correct": True},
            {"id": "c", "text": "5"},
        ],
    )


class TestSingleSelect:
    def test_correct_option_earns_points(self, single_select):
        result = grade_answer(single_select, "b")
        assert result.is_correct is True
        assert result.points_earned == 10

    def test_wrong_option_earns_nothing(self, single_select):
        result = grade_answer(single_select, "a")
        assert result.is_correct is False
        assert result.points_earned == 0

    @pytest.mark.parametrize("submitted", ["zzz", None, 42, ""])
    def test_unknown_option_is_incorrect_not_an_error(self, single_select, submitted):
        assert grade_answer(single_select, submitted).is_correct is False

    def test_numeric_option_ids_match_their_string_form(self):
        question = SingleSelectQuestion(
            id=7, prompt="?", options=[{"id": "12", "is_correct": True}, {"id": "13"}]
        )
        assert is_correct(question, 12) is True

    def test_no_option_flagged_correct(self):
        question = SingleSelectQuestion(id="q", prompt="?", options=[{"id": "a"}, {"id": "b"}])
        assert is_correct(question, "a") is False


class TestTrueFalse:
    @pytest.mark.parametrize("canonical,submitted", [
        (True, "true"),
        ("true", True),
        ("False", "false"),
        ("true", "  TRUE "),
    ])
    def test_normalized_string_comparison(self, canonical, submitted):
        question = TrueFalseQuestion(id="t", prompt="?", correct_answer=canonical)
        assert is_correct(question, submitted) is True

    def test_mismatch(self):
        question = TrueFalseQuestion(id="t", prompt="?", correct_answer=True)
        assert is_correct(question, "false") is False
        assert is_correct(question, None) is False


class TestShortAnswer:
    def test_trimmed_and_case_folded(self):
        question = ShortAnswerQuestion(id="s", prompt="?", correct_answer=" Straße ")
        assert is_correct(question, "STRASSE") is True
        assert is_correct(question, "  straße") is True

    def test_different_text(self):
        question = ShortAnswerQuestion(id="s", prompt="?", correct_answer="Paris")
        assert is_correct(question, "Lyon") is False


class TestMatching:
    def test_order_sensitive_deep_equality(self):
        question = MatchingQuestion(
            id="m", prompt="?", correct_answer=[["cat", "meow"], ["dog", "woof"]]
        )
        assert is_correct(question, [["cat", "meow"], ["dog", "woof"]]) is True
        assert is_correct(question, [("cat", "meow"), ("dog", "woof")]) is True
        assert is_correct(question, [["dog", "woof"], ["cat", "meow"]]) is False


def test_unregistered_kind_raises_type_error():
    class EssayQuestion:
        points = 5

    with pytest.raises(TypeError):
        grade_answer(EssayQuestion(), "anything")


def test_variant_requires_its_own_fields():
    with pytest.raises(ValidationError):
        question_adapter.validate_python({"id": "x", "kind": "short-answer", "prompt": "?"})
    with pytest.raises(ValidationError):
        question_adapter.validate_python({"id": "x", "kind": "single-select", "prompt": "?"})
    with pytest.raises(ValidationError):
        question_adapter.validate_python({"id": "x", "kind": "essay", "prompt": "?"})
