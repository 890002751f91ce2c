"""
Answer Key

Structural checks for a quiz's questions. Run before any quiz is saved;
the same helpers are read by the scoring code.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List, Set

from quiz_engine.core.exceptions import QuizValidationError

SINGLE_CHOICE = "single"
MULTIPLE_CHOICE = "multiple"
QUESTION_TYPES = (SINGLE_CHOICE, MULTIPLE_CHOICE)


def _field(item: Any, name: str, default: Any = None) -> Any:
    # Questions arrive as ORM rows, pydantic models or plain dicts
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def option_is_correct(option: Any) -> bool:
    return bool(_field(option, "is_correct", False))


def correct_option_indices(question: Any) -> Set[int]:
    """Indices of the options flagged correct."""
    options = _field(question, "options") or []
    return {idx for idx, opt in enumerate(options) if option_is_correct(opt)}


def validate_questions(questions: Iterable[Any]) -> List[str]:
    """
    Return one message per violated rule; an empty list means valid.

    Rules per question (1-based numbering in messages):
    - at least two options
    - at least one correct option
    - single choice questions have exactly one correct option
    """
    errors = []

    for number, question in enumerate(questions, start=1):
        options = _field(question, "options") or []
        if len(options) < 2:
            errors.append(f"Question {number} must have at least 2 options")

        correct_count = len(correct_option_indices(question))
        if correct_count == 0:
            errors.append(f"Question {number} must have at least one correct answer")

        question_type = _field(question, "question_type", SINGLE_CHOICE)
        if question_type == SINGLE_CHOICE and correct_count > 1:
            errors.append(
                f"Question {number} is single choice but has multiple correct answers"
            )

    return errors


def ensure_valid(questions: Iterable[Any]) -> None:
    """Raise QuizValidationError when `validate_questions` reports anything."""
    errors = validate_questions(questions)
    if errors:
        raise QuizValidationError(errors)
