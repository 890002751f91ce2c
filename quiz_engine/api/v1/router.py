from fastapi import APIRouter
from quiz_engine.api.v1.endpoints import auth, student_quizzes, trainer_quizzes

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Include auth routes at /auth
api_router.include_router(
    auth.router,
    prefix="/auth"
)

# Quiz authoring at /trainer/quizzes
api_router.include_router(
    trainer_quizzes.router,
    prefix="/trainer/quizzes"
)

# Quiz taking at /student/quizzes
api_router.include_router(
    student_quizzes.router,
    prefix="/student/quizzes"
)
