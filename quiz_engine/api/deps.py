from fastapi import HTTPException, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging

from quiz_engine.db.database import get_db
from quiz_engine.core.exceptions import AppError
from quiz_engine.models import User
from quiz_engine.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# Bearer scheme shown in Swagger UI
security = HTTPBearer()


# =====================================================
# Caller identity
# =====================================================
async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the bearer token to an active user.

    Endpoints pass `current_user.id` (or the user) into the services;
    no service reads identity from the request.
    """
    try:
        return await AuthService(db).get_current_user(credentials.credentials)
    except AppError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"}
        )


# =====================================================
# Role guards
# =====================================================
async def require_trainer(
    current_user: User = Depends(get_current_user)
) -> User:
    """Quiz authoring is open to trainers and admins only."""
    if not current_user.can_author_quizzes:
        logger.warning(f"Quiz authoring denied for user_id={current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Trainer access required"
        )
    return current_user
