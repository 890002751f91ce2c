from sqlalchemy import Column, String, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from .base import BaseModel


class QuizQuestion(BaseModel):
    __tablename__ = "quiz_questions"

    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    # Question content
    question_type = Column(String(20), default="single", nullable=False)  # single, multiple
    question_text = Column(Text, nullable=False)

    # [{"text": "...", "is_correct": true}, ...]; position is the option index
    options = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    explanation = Column(Text, nullable=True)

    # Metadata
    points = Column(Integer, default=1, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
