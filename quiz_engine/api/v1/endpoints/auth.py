"""
Auth Endpoints

- POST /auth/login  - Exchange email + password for a bearer token
- GET  /auth/me     - The caller behind the token
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.db.database import get_db
from quiz_engine.api.deps import get_current_user
from quiz_engine.core.exceptions import AppError
from quiz_engine.models.user import User
from quiz_engine.schemas.auth import TokenResponse, UserLogin, UserResponse
from quiz_engine.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials or deactivated account"}},
)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Sign in with a provisioned account."""
    try:
        return await AuthService(db).login(login_data)
    except AppError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"}
        )


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
