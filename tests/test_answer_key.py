import pytest

from quiz_engine.core.exceptions import QuizValidationError
from quiz_engine.services.answer_key import (
    correct_option_indices,
    ensure_valid,
    validate_questions,
)


def q(question_type="single", flags=(True, False)):
    return {
        "question_type": question_type,
        "options": [{"text": f"option {i}", "is_correct": flag} for i, flag in enumerate(flags)],
    }


def test_valid_questions_have_no_errors():
    questions = [q("single", (True, False, False)), q("multiple", (True, True, False))]
    assert validate_questions(questions) == []


def test_multiple_choice_may_have_single_correct_option():
    assert validate_questions([q("multiple", (False, True))]) == []


def test_too_few_options():
    errors = validate_questions([q("single", (True,))])
    assert errors == ["Question 1 must have at least 2 options"]


def test_no_correct_option():
    errors = validate_questions([q("single", (True, False)), q("multiple", (False, False))])
    assert errors == ["Question 2 must have at least one correct answer"]


def test_single_choice_with_two_correct_options():
    errors = validate_questions([q("single", (True, True, False))])
    assert errors == ["Question 1 is single choice but has multiple correct answers"]


def test_empty_option_list_reports_both_rules():
    errors = validate_questions([q("single", ())])
    assert errors == [
        "Question 1 must have at least 2 options",
        "Question 1 must have at least one correct answer",
    ]


def test_empty_quiz_is_structurally_valid():
    assert validate_questions([]) == []


def test_ensure_valid_raises_with_every_message():
    with pytest.raises(QuizValidationError) as exc_info:
        ensure_valid([q("single", (True,)), q("single", (True, True))])

    error = exc_info.value
    assert error.status_code == 400
    assert len(error.errors) == 2
    assert error.message == "; ".join(error.errors)


def test_correct_option_indices():
    assert correct_option_indices(q("multiple", (False, True, True))) == {1, 2}
    assert correct_option_indices({"options": None}) == set()
