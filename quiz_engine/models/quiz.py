from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class Quiz(BaseModel):
    __tablename__ = "quizzes"

    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    # Optional placement inside the course (owned by other services)
    module_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    session_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    group_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    # Quiz info
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    instructions = Column(Text, nullable=True)

    # Settings
    passing_score = Column(Integer, default=70, nullable=False)  # percentage 0-100
    time_limit_minutes = Column(Integer, nullable=True)  # NULL = no limit, advisory only
    max_attempts = Column(Integer, default=3, nullable=False)
    shuffle_questions = Column(Boolean, default=False, nullable=False)
    shuffle_options = Column(Boolean, default=False, nullable=False)
    show_feedback = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    course = relationship("Course", back_populates="quizzes")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.display_order",
        lazy="selectin",
    )
    attempts = relationship("QuizAttempt", back_populates="quiz", passive_deletes=True)

    @property
    def total_points(self) -> int:
        return sum(q.points or 0 for q in self.questions)

    @property
    def question_count(self) -> int:
        return len(self.questions)
