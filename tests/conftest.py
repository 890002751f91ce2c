"""
Shared fixtures.

Every test gets its own in-memory SQLite database. The application's
`get_db` dependency is swapped for sessions bound to that database, and
callers authenticate with tokens minted through `create_access_token`.
"""

import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-quiz-engine"
os.environ["DEBUG"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quiz_engine.core.security import create_access_token, hash_password
from quiz_engine.db.database import Base, get_db
from quiz_engine.main import app
from quiz_engine.models import (
    Course,
    Enrollment,
    EnrollmentStatus,
    Quiz,
    QuizQuestion,
    User,
    UserRole,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "Secret123!"
PASSWORD_HASH = hash_password(PASSWORD)


# ============================================================
# Database
# ============================================================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ============================================================
# Users, courses, enrollments
# ============================================================

async def make_user(db, email, role=UserRole.STUDENT, full_name="Test User", is_active=True) -> User:
    user = User(
        email=email,
        password_hash=PASSWORD_HASH,
        full_name=full_name,
        role=role,
        is_active=is_active,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def trainer(db):
    return await make_user(db, "trainer@example.com", UserRole.TRAINER, "Tess Trainer")


@pytest_asyncio.fixture
async def other_trainer(db):
    return await make_user(db, "other.trainer@example.com", UserRole.TRAINER, "Otto Other")


@pytest_asyncio.fixture
async def admin(db):
    return await make_user(db, "admin@example.com", UserRole.ADMIN, "Ada Admin")


@pytest_asyncio.fixture
async def student(db):
    return await make_user(db, "student@example.com", UserRole.STUDENT, "Sam Student")


@pytest_asyncio.fixture
async def course(db, trainer):
    course = Course(title="Electronics 101", instructor_id=trainer.id, is_active=True)
    db.add(course)
    await db.commit()
    return course


async def enroll(db, student, course, status=EnrollmentStatus.ACTIVE) -> Enrollment:
    enrollment = Enrollment(student_id=student.id, course_id=course.id, status=status)
    db.add(enrollment)
    await db.commit()
    return enrollment


@pytest_asyncio.fixture
async def enrollment(db, student, course):
    return await enroll(db, student, course)


# ============================================================
# Quizzes
# ============================================================

def sample_questions():
    """A 10 point single choice question followed by a 5 point multiple choice one."""
    return [
        QuizQuestion(
            question_type="single",
            question_text="Which expression gives the voltage?",
            options=[
                {"text": "I * R", "is_correct": True},
                {"text": "I / R", "is_correct": False},
                {"text": "R / I", "is_correct": False},
            ],
            explanation="Voltage is current times resistance.",
            points=10,
            display_order=0,
        ),
        QuizQuestion(
            question_type="multiple",
            question_text="Which are passive components?",
            options=[
                {"text": "Resistor", "is_correct": True},
                {"text": "Capacitor", "is_correct": True},
                {"text": "Transistor", "is_correct": False},
            ],
            explanation="Resistors and capacitors cannot amplify.",
            points=5,
            display_order=1,
        ),
    ]


async def make_quiz(db, course, creator, **overrides) -> Quiz:
    values = dict(
        course_id=course.id,
        title="Ohm's law check",
        passing_score=70,
        time_limit_minutes=15,
        max_attempts=3,
        shuffle_questions=False,
        shuffle_options=False,
        show_feedback=True,
        is_active=True,
        created_by=creator.id,
        questions=sample_questions(),
    )
    values.update(overrides)
    quiz = Quiz(**values)
    db.add(quiz)
    await db.commit()
    return quiz


@pytest_asyncio.fixture
async def quiz(db, course, trainer):
    return await make_quiz(db, course, trainer)


# ============================================================
# Auth helpers
# ============================================================

def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role.value)}"}
