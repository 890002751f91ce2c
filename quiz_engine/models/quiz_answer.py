from sqlalchemy import Column, Integer, Boolean, ForeignKey, Text, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from .base import BaseModel


class QuizAnswer(BaseModel):
    __tablename__ = "quiz_answers"

    attempt_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)

    # Points into the quiz's question list; no FK so edited quizzes keep their history
    question_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    question_text = Column(Text, nullable=True)  # snapshot at submission time

    # Answer
    selected_options = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)  # [0, 2]
    is_correct = Column(Boolean, default=False, nullable=False)
    points_earned = Column(Integer, default=0, nullable=False)
    position = Column(Integer, default=0, nullable=False)  # order in the submission

    # Relationships
    attempt = relationship("QuizAttempt", back_populates="answers")
