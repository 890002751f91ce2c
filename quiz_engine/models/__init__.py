from quiz_engine.models.base import Base
from quiz_engine.models.user import User, UserRole
from quiz_engine.models.course import Course
from quiz_engine.models.enrollment import Enrollment, EnrollmentStatus
from quiz_engine.models.quiz import Quiz
from quiz_engine.models.quiz_question import QuizQuestion
from quiz_engine.models.quiz_attempt import QuizAttempt, AttemptStatus
from quiz_engine.models.quiz_answer import QuizAnswer

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Course",
    "Enrollment",
    "EnrollmentStatus",
    "Quiz",
    "QuizQuestion",
    "QuizAttempt",
    "AttemptStatus",
    "QuizAnswer",
]
