from quiz_engine.repositories.base import BaseRepository
from quiz_engine.repositories.user_repo import UserRepository
from quiz_engine.repositories.course_repo import CourseRepository, EnrollmentRepository
from quiz_engine.repositories.quiz_repo import (
    QuizRepository,
    QuizAttemptRepository,
    QuizAnswerRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CourseRepository",
    "EnrollmentRepository",
    "QuizRepository",
    "QuizAttemptRepository",
    "QuizAnswerRepository",
]
