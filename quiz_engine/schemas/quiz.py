"""
Quiz Schemas

Pydantic models for quiz authoring and for the student-facing quiz view.
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# ============================================================
# Enums
# ============================================================

class QuestionType(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


# ============================================================
# Request Schemas
# ============================================================

class OptionCreate(BaseModel):
    """One answer option; its position in the list is its index."""
    text: str = Field(..., min_length=1, max_length=500)
    is_correct: bool = False


class QuestionCreate(BaseModel):
    """A question as written by the trainer."""
    id: Optional[UUID] = Field(
        None,
        description="Existing question id to keep when updating a quiz"
    )
    question_text: str = Field(..., min_length=1, max_length=1000)
    question_type: QuestionType = QuestionType.SINGLE
    options: List[OptionCreate] = Field(default_factory=list)
    points: int = Field(default=1, ge=0)
    explanation: Optional[str] = Field(None, max_length=1000)

    @field_validator("question_text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Question text cannot be empty")
        return value


class QuizSettingsMixin(BaseModel):
    description: Optional[str] = Field(None, max_length=1000)
    instructions: Optional[str] = Field(None, max_length=2000)
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    time_limit_minutes: Optional[int] = Field(None, ge=1)
    max_attempts: Optional[int] = Field(None, ge=1)
    shuffle_questions: Optional[bool] = None
    shuffle_options: Optional[bool] = None
    show_feedback: Optional[bool] = None
    module_id: Optional[UUID] = None
    session_id: Optional[UUID] = None
    group_id: Optional[UUID] = None


class QuizCreate(QuizSettingsMixin):
    """Request to create a quiz."""
    course_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    questions: List[QuestionCreate] = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        normalized = " ".join(value.split())
        if not normalized:
            raise ValueError("Quiz title cannot be empty")
        return normalized

    class Config:
        json_schema_extra = {
            "example": {
                "course_id": "0e8f5c4a-3c41-4c3f-9af7-2c8d7db3d6d4",
                "title": "Ohm's law check",
                "passing_score": 70,
                "max_attempts": 3,
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
                    }
                ],
            }
        }


class QuizUpdate(QuizSettingsMixin):
    """Partial update; `questions`, when present, replaces the whole list."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    is_active: Optional[bool] = None
    questions: Optional[List[QuestionCreate]] = None

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        normalized = " ".join(value.split())
        if not normalized:
            raise ValueError("Quiz title cannot be empty")
        return normalized


# ============================================================
# Response Schemas
# ============================================================

class OptionResponse(BaseModel):
    text: str
    is_correct: bool


class QuestionResponse(BaseModel):
    """A question including its answer key (trainer view)."""
    id: UUID
    question_type: str
    question_text: str
    options: List[OptionResponse]
    points: int
    explanation: Optional[str] = None
    display_order: int

    class Config:
        from_attributes = True


class QuizResponse(BaseModel):
    """Quiz metadata."""
    id: UUID
    course_id: UUID
    module_id: Optional[UUID] = None
    session_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    passing_score: int
    time_limit_minutes: Optional[int] = None
    max_attempts: int
    shuffle_questions: bool
    shuffle_options: bool
    show_feedback: bool
    is_active: bool
    question_count: int
    total_points: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuizDetailResponse(QuizResponse):
    """Quiz with its full answer key."""
    questions: List[QuestionResponse]


class QuizListResponse(BaseModel):
    quizzes: List[QuizResponse]
    count: int


class StudentOptionResponse(BaseModel):
    """An option without its correctness flag."""
    index: int
    text: str


class StudentQuestionResponse(BaseModel):
    id: UUID
    question_type: str
    question_text: str
    points: int
    options: List[StudentOptionResponse]


class StudentQuizResponse(BaseModel):
    """Quiz as shown to a student before or while taking it."""
    id: UUID
    course_id: UUID
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    passing_score: int
    time_limit_minutes: Optional[int] = None
    max_attempts: int
    question_count: int
    total_points: int
    attempt_count: int
    can_attempt: bool
    questions: List[StudentQuestionResponse]
