"""
Attempt Schemas

Requests and responses for starting, submitting and reviewing quiz attempts.
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================
# Request Schemas
# ============================================================

class AnswerSubmission(BaseModel):
    """Selected option indices for one question."""
    question_id: UUID
    selected_options: List[int] = Field(default_factory=list)


class QuizSubmitRequest(BaseModel):
    attempt_id: UUID
    answers: List[AnswerSubmission]

    class Config:
        json_schema_extra = {
            "example": {
                "attempt_id": "4a4f5b63-8a0e-4d43-9a5b-6a8bd3bbf0a1",
                "answers": [
                    {"question_id": "b5c2b1ce-31a4-4a8e-8a46-2b1d58c6a7e0", "selected_options": [0]}
                ],
            }
        }


# ============================================================
# Response Schemas
# ============================================================

class AnswerResponse(BaseModel):
    question_id: UUID
    question_text: Optional[str] = None
    selected_options: List[int]
    is_correct: bool
    points_earned: int

    class Config:
        from_attributes = True


class AttemptResponse(BaseModel):
    """Full attempt record."""
    id: UUID
    quiz_id: UUID
    course_id: UUID
    student_id: UUID
    attempt_number: int
    status: str
    total_points: int
    earned_points: int
    score: Optional[int] = None
    passed: bool
    started_at: datetime
    submitted_at: Optional[datetime] = None
    time_spent: int
    time_limit_minutes: Optional[int] = Field(
        None,
        description="Advisory limit for client-side countdowns; not enforced"
    )
    answers: List[AnswerResponse] = Field(default_factory=list)


class StartAttemptResponse(BaseModel):
    message: str
    attempt_id: UUID
    attempt: AttemptResponse


class OptionDetail(BaseModel):
    index: int
    text: str
    is_correct: bool


class DetailedResult(BaseModel):
    """Per-question feedback, only produced when the quiz shows feedback."""
    question_id: UUID
    question: Optional[str] = None
    selected_options: List[int]
    correct_options: List[int]
    is_correct: bool
    points_earned: int
    explanation: Optional[str] = None
    all_options: Optional[List[OptionDetail]] = None


class SubmitResultResponse(BaseModel):
    message: str
    score: int
    earned_points: int
    total_points: int
    passed: bool
    time_spent: int
    attempt_id: UUID
    attempt_number: int
    detailed_results: Optional[List[DetailedResult]] = None


class AttemptSummary(BaseModel):
    """Row of the attempt history."""
    id: UUID
    attempt_number: int
    score: Optional[int] = None
    earned_points: int
    total_points: int
    passed: bool
    submitted_at: Optional[datetime] = None
    time_spent: int

    class Config:
        from_attributes = True


class AttemptHistoryResponse(BaseModel):
    count: int
    best_score: Optional[int] = None
    attempts: List[AttemptSummary]


class QuizSummary(BaseModel):
    title: str
    passing_score: int
    total_questions: int


class AttemptResultResponse(BaseModel):
    attempt: AttemptSummary
    quiz: QuizSummary
    detailed_results: Optional[List[DetailedResult]] = None
