import uuid
from types import SimpleNamespace

import pytest

from quiz_engine.services.scoring import (
    grade_submission,
    has_passed,
    score_answer,
    score_percentage,
)


def question(question_type, correct, points, option_count=3):
    return SimpleNamespace(
        id=uuid.uuid4(),
        question_type=question_type,
        question_text=f"{question_type} question",
        options=[{"text": f"option {i}", "is_correct": i in correct} for i in range(option_count)],
        points=points,
    )


def answer(question_id, selected):
    return SimpleNamespace(question_id=question_id, selected_options=selected)


# ------------------------------------------------------------
# Per-question scoring
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "selected, is_correct, points",
    [
        ([0], True, 10),
        ([0, 1], False, 0),
        ([1], False, 0),
        ([], False, 0),
    ],
)
def test_single_choice(selected, is_correct, points):
    q = question("single", correct={0}, points=10)

    result = score_answer(q, selected)

    assert result.is_correct is is_correct
    assert result.points_earned == points


@pytest.mark.parametrize(
    "selected, is_correct, points",
    [
        ([0, 1], True, 5),
        ([1, 0], True, 5),
        ([0], False, 0),
        ([0, 1, 2], False, 0),
        ([], False, 0),
    ],
)
def test_multiple_choice(selected, is_correct, points):
    q = question("multiple", correct={0, 1}, points=5)

    result = score_answer(q, selected)

    assert result.is_correct is is_correct
    assert result.points_earned == points


def test_repeated_index_counts_once():
    q = question("multiple", correct={0, 1}, points=5)
    assert score_answer(q, [0, 1, 1, 0]).is_correct


def test_out_of_range_index_never_matches():
    q = question("single", correct={0}, points=10)
    assert not score_answer(q, [7]).is_correct


# ------------------------------------------------------------
# Whole submission
# ------------------------------------------------------------

def test_aggregate_one_right_one_wrong():
    single = question("single", correct={0}, points=10)
    multiple = question("multiple", correct={0, 1}, points=5)
    by_id = {single.id: single, multiple.id: multiple}

    graded = grade_submission(by_id, [answer(single.id, [0]), answer(multiple.id, [0])])

    assert graded.earned_points == 10
    assert graded.total_points == 15
    assert graded.score == 67
    assert has_passed(graded.score, 60)
    assert not has_passed(graded.score, 70)
    assert [a.is_correct for a in graded.answers] == [True, False]


def test_unknown_question_is_dropped():
    single = question("single", correct={0}, points=10)

    graded = grade_submission(
        {single.id: single},
        [answer(single.id, [0]), answer(uuid.uuid4(), [0, 1])],
    )

    assert graded.total_points == 10
    assert graded.earned_points == 10
    assert graded.score == 100
    assert len(graded.answers) == 1


def test_unanswered_questions_do_not_count():
    single = question("single", correct={0}, points=10)
    multiple = question("multiple", correct={0, 1}, points=5)

    graded = grade_submission({single.id: single, multiple.id: multiple}, [answer(multiple.id, [0, 1])])

    assert graded.total_points == 5
    assert graded.score == 100


def test_empty_submission_scores_zero():
    graded = grade_submission({}, [])

    assert graded.total_points == 0
    assert graded.score == 0
    assert graded.answers == []


def test_duplicate_answers_are_each_scored():
    single = question("single", correct={0}, points=10)

    graded = grade_submission({single.id: single}, [answer(single.id, [0]), answer(single.id, [1])])

    assert graded.total_points == 20
    assert graded.earned_points == 10
    assert graded.score == 50


# ------------------------------------------------------------
# Percentages
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "earned, total, expected",
    [
        (10, 15, 67),
        (1, 8, 13),  # 12.5 rounds up
        (1, 3, 33),
        (2, 3, 67),
        (0, 5, 0),
        (5, 5, 100),
        (0, 0, 0),
    ],
)
def test_score_percentage(earned, total, expected):
    assert score_percentage(earned, total) == expected


def test_has_passed_boundary():
    assert has_passed(70, 70)
    assert not has_passed(69, 70)
    assert has_passed(0, 0)
    assert not has_passed(None, 0)
