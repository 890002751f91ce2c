import enum

from sqlalchemy import (
    Column, Integer, Boolean, ForeignKey, DateTime, Enum, Index, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from .base import BaseModel, utcnow


class AttemptStatus(enum.Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class QuizAttempt(BaseModel):
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        # Two racing starts cannot both claim the same attempt number
        UniqueConstraint("student_id", "quiz_id", "attempt_number", name="uq_attempt_student_quiz_number"),
        Index("ix_quiz_attempts_quiz_status", "quiz_id", "status"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    attempt_number = Column(Integer, nullable=False)
    status = Column(
        Enum(
            AttemptStatus,
            name="attempt_status",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=AttemptStatus.IN_PROGRESS,
        nullable=False
    )

    # Results (filled on submission)
    total_points = Column(Integer, default=0, nullable=False)
    earned_points = Column(Integer, default=0, nullable=False)
    score = Column(Integer, nullable=True)  # percentage
    passed = Column(Boolean, default=False, nullable=False)

    # Timing
    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    time_spent = Column(Integer, default=0, nullable=False)  # seconds

    # Relationships
    student = relationship("User", back_populates="quiz_attempts")
    quiz = relationship("Quiz", back_populates="attempts")
    answers = relationship(
        "QuizAnswer",
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="QuizAnswer.position",
        lazy="selectin",
    )
