"""
Scoring

Pure functions that grade submitted answers against a quiz's answer key.
Nothing here touches the database.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from quiz_engine.services.answer_key import SINGLE_CHOICE, correct_option_indices


@dataclass(frozen=True)
class AnswerScore:
    is_correct: bool
    points_earned: int


@dataclass
class GradedAnswer:
    question: Any
    selected_options: List[int]
    is_correct: bool
    points_earned: int


@dataclass
class GradedSubmission:
    answers: List[GradedAnswer] = field(default_factory=list)
    total_points: int = 0
    earned_points: int = 0

    @property
    def score(self) -> int:
        return score_percentage(self.earned_points, self.total_points)


def score_answer(question: Any, selected_options: Iterable[int]) -> AnswerScore:
    """
    Grade one answer.

    Single choice: exactly one index selected and it is a correct one.
    Multiple choice: the selected set equals the correct set.
    Indices are not range-checked; an unknown index never matches.
    """
    selected = set(selected_options)
    correct = correct_option_indices(question)

    if question.question_type == SINGLE_CHOICE:
        is_correct = len(selected) == 1 and next(iter(selected)) in correct
    else:
        is_correct = selected == correct

    return AnswerScore(
        is_correct=is_correct,
        points_earned=question.points if is_correct else 0,
    )


def grade_submission(
    questions_by_id: Dict[UUID, Any],
    answers: Iterable[Any],
) -> GradedSubmission:
    """
    Grade every answer whose question exists in the quiz.

    Answers naming an unknown question are skipped and count towards
    neither earned nor total points.
    """
    graded = GradedSubmission()

    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        if question is None:
            continue

        result = score_answer(question, answer.selected_options)
        graded.total_points += question.points
        graded.earned_points += result.points_earned
        graded.answers.append(
            GradedAnswer(
                question=question,
                selected_options=list(answer.selected_options),
                is_correct=result.is_correct,
                points_earned=result.points_earned,
            )
        )

    return graded


def score_percentage(earned_points: int, total_points: int) -> int:
    """Percentage rounded half up; 0 when nothing was at stake."""
    if total_points <= 0:
        return 0
    return int(math.floor(earned_points * 100 / total_points + 0.5))


def has_passed(score: Optional[int], passing_score: int) -> bool:
    return score is not None and score >= passing_score
