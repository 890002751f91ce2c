import uuid

from conftest import auth_headers, make_quiz

API = "/api/v1/trainer/quizzes"


def quiz_payload(course_id, **overrides):
    payload = {
        "course_id": str(course_id),
        "title": "  Circuits   basics ",
        "passing_score": 60,
        "max_attempts": 2,
        "questions": [
            {
                "question_text": "V = ?",
                "question_type": "single",
                "points": 10,
                "options": [
                    {"text": "I * R", "is_correct": True},
                    {"text": "I / R", "is_correct": False},
                ],
                "explanation": "Voltage is current times resistance.",
            },
            {
                "question_text": "Which are passive?",
                "question_type": "multiple",
                "points": 5,
                "options": [
                    {"text": "Resistor", "is_correct": True},
                    {"text": "Capacitor", "is_correct": True},
                    {"text": "Transistor", "is_correct": False},
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


# ============================================================
# Create
# ============================================================

async def test_create_quiz(client, trainer, course):
    response = await client.post(API, json=quiz_payload(course.id), headers=auth_headers(trainer))

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Circuits basics"
    assert body["passing_score"] == 60
    assert body["max_attempts"] == 2
    assert body["show_feedback"] is True
    assert body["question_count"] == 2
    assert body["total_points"] == 15
    assert [q["display_order"] for q in body["questions"]] == [0, 1]
    assert body["questions"][0]["options"][0] == {"text": "I * R", "is_correct": True}


async def test_create_quiz_applies_defaults(client, trainer, course):
    payload = quiz_payload(course.id)
    del payload["passing_score"]
    del payload["max_attempts"]

    response = await client.post(API, json=payload, headers=auth_headers(trainer))

    assert response.status_code == 201
    assert response.json()["passing_score"] == 70
    assert response.json()["max_attempts"] == 3


async def test_create_rejects_invalid_answer_key(client, trainer, course):
    payload = quiz_payload(course.id)
    payload["questions"][0]["options"] = [{"text": "Only", "is_correct": True}]
    payload["questions"][1]["question_type"] = "single"

    response = await client.post(API, json=payload, headers=auth_headers(trainer))

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Question 1 must have at least 2 options; "
                   "Question 2 is single choice but has multiple correct answers",
    }


async def test_create_requires_questions(client, trainer, course):
    response = await client.post(
        API, json=quiz_payload(course.id, questions=[]), headers=auth_headers(trainer)
    )

    assert response.status_code == 400


async def test_create_for_someone_elses_course(client, other_trainer, course):
    response = await client.post(API, json=quiz_payload(course.id), headers=auth_headers(other_trainer))

    assert response.status_code == 403
    assert response.json()["message"] == "You do not have access to this course"


async def test_create_for_unknown_course(client, trainer):
    response = await client.post(API, json=quiz_payload(uuid.uuid4()), headers=auth_headers(trainer))

    assert response.status_code == 404
    assert response.json()["message"] == "Course not found"


async def test_admin_can_author_any_course(client, admin, course):
    response = await client.post(API, json=quiz_payload(course.id), headers=auth_headers(admin))

    assert response.status_code == 201


async def test_students_cannot_author(client, student, course):
    response = await client.post(API, json=quiz_payload(course.id), headers=auth_headers(student))

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Trainer access required"}


# ============================================================
# Read
# ============================================================

async def test_list_quizzes(client, db, trainer, other_trainer, course, quiz):
    mine = await client.get(API, headers=auth_headers(trainer))
    theirs = await client.get(API, headers=auth_headers(other_trainer))

    assert mine.json()["count"] == 1
    assert mine.json()["quizzes"][0]["id"] == str(quiz.id)
    assert theirs.json() == {"quizzes": [], "count": 0}


async def test_list_course_quizzes(client, trainer, other_trainer, course, quiz):
    allowed = await client.get(f"{API}/course/{course.id}", headers=auth_headers(trainer))
    denied = await client.get(f"{API}/course/{course.id}", headers=auth_headers(other_trainer))

    assert allowed.status_code == 200
    assert allowed.json()["count"] == 1
    assert denied.status_code == 403


async def test_get_quiz_includes_answer_key(client, trainer, quiz):
    response = await client.get(f"{API}/{quiz.id}", headers=auth_headers(trainer))

    assert response.status_code == 200
    options = response.json()["questions"][1]["options"]
    assert [o["is_correct"] for o in options] == [True, True, False]


async def test_get_quiz_of_other_trainer(client, other_trainer, quiz):
    response = await client.get(f"{API}/{quiz.id}", headers=auth_headers(other_trainer))

    assert response.status_code == 403
    assert response.json()["message"] == "You do not have access to this quiz"


# ============================================================
# Update
# ============================================================

async def test_update_settings_only(client, trainer, quiz):
    response = await client.put(
        f"{API}/{quiz.id}",
        json={"title": "Renamed", "passing_score": 50, "shuffle_options": True},
        headers=auth_headers(trainer),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Renamed"
    assert body["passing_score"] == 50
    assert body["shuffle_options"] is True
    assert body["question_count"] == 2


async def test_update_ignores_null_for_required_fields(client, trainer, quiz):
    response = await client.put(
        f"{API}/{quiz.id}",
        json={"passing_score": None, "time_limit_minutes": None},
        headers=auth_headers(trainer),
    )

    assert response.status_code == 200
    assert response.json()["passing_score"] == 70
    assert response.json()["time_limit_minutes"] is None


async def test_update_replaces_questions_keeping_sent_ids(client, trainer, quiz):
    headers = auth_headers(trainer)
    current = (await client.get(f"{API}/{quiz.id}", headers=headers)).json()
    kept = current["questions"][1]

    response = await client.put(
        f"{API}/{quiz.id}",
        json={
            "questions": [
                {
                    "id": kept["id"],
                    "question_text": "Which are passive components?",
                    "question_type": "multiple",
                    "points": 8,
                    "options": kept["options"],
                },
                {
                    "question_text": "Unit of resistance?",
                    "question_type": "single",
                    "options": [
                        {"text": "Ohm", "is_correct": True},
                        {"text": "Volt", "is_correct": False},
                    ],
                },
            ]
        },
        headers=headers,
    )

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert questions[0]["id"] == kept["id"]
    assert questions[0]["points"] == 8
    assert questions[1]["id"] not in {q["id"] for q in current["questions"]}
    assert response.json()["total_points"] == 9


async def test_update_with_a_repeated_question_id_keeps_both_questions(client, trainer, quiz):
    headers = auth_headers(trainer)
    current = (await client.get(f"{API}/{quiz.id}", headers=headers)).json()
    first = current["questions"][0]
    repeated = {
        "id": first["id"],
        "question_type": "single",
        "options": first["options"],
    }

    response = await client.put(
        f"{API}/{quiz.id}",
        json={
            "questions": [
                dict(repeated, question_text="first"),
                dict(repeated, question_text="second"),
            ]
        },
        headers=headers,
    )

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert [q["question_text"] for q in questions] == ["first", "second"]
    assert questions[0]["id"] == first["id"]
    assert questions[1]["id"] != first["id"]
    assert response.json()["question_count"] == 2


async def test_update_rejects_invalid_questions(client, trainer, quiz):
    response = await client.put(
        f"{API}/{quiz.id}",
        json={
            "title": "Should not stick",
            "questions": [
                {
                    "question_text": "No correct option",
                    "options": [{"text": "a"}, {"text": "b"}],
                }
            ],
        },
        headers=auth_headers(trainer),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Question 1 must have at least one correct answer"

    current = await client.get(f"{API}/{quiz.id}", headers=auth_headers(trainer))
    assert current.json()["title"] == "Ohm's law check"


# ============================================================
# Delete / duplicate
# ============================================================

async def test_delete_quiz_without_attempts(client, trainer, quiz):
    headers = auth_headers(trainer)

    response = await client.delete(f"{API}/{quiz.id}", headers=headers)

    assert response.status_code == 204
    missing = await client.get(f"{API}/{quiz.id}", headers=headers)
    assert missing.status_code == 404


async def test_delete_quiz_with_attempts_conflicts(client, trainer, student, enrollment, quiz):
    await client.post(f"/api/v1/student/quizzes/{quiz.id}/start", headers=auth_headers(student))

    response = await client.delete(f"{API}/{quiz.id}", headers=auth_headers(trainer))

    assert response.status_code == 409
    assert response.json()["success"] is False


async def test_duplicate_quiz(client, db, trainer, course):
    quiz = await make_quiz(db, course, trainer, show_feedback=False, max_attempts=5)

    response = await client.post(f"{API}/{quiz.id}/duplicate", headers=auth_headers(trainer))

    assert response.status_code == 201
    body = response.json()
    assert body["id"] != str(quiz.id)
    assert body["title"] == "Ohm's law check (Copy)"
    assert body["show_feedback"] is False
    assert body["max_attempts"] == 5
    assert [q["question_text"] for q in body["questions"]] == [q.question_text for q in quiz.questions]
    assert {q["id"] for q in body["questions"]}.isdisjoint({str(q.id) for q in quiz.questions})
