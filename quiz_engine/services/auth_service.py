"""
Auth Service

Signs existing users in and resolves bearer tokens back to the caller.
The resolved user is what endpoints pass into the quiz services as the
explicit caller identity.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.core.config import settings
from quiz_engine.core.exceptions import UnauthorizedError
from quiz_engine.core.security import create_access_token, decode_token, verify_password
from quiz_engine.models import User
from quiz_engine.repositories.user_repo import UserRepository
from quiz_engine.schemas.auth import TokenResponse, UserLogin, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Service for sign-in and token resolution."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    # ============================================================
    # LOGIN
    # ============================================================

    async def login(self, login_data: UserLogin) -> TokenResponse:
        """
        Check credentials and issue an access token.

        Raises:
            UnauthorizedError: unknown email, wrong password or deactivated account
        """
        user = await self.user_repo.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for email={login_data.email}")
            raise UnauthorizedError("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedError("This account has been deactivated")

        await self.user_repo.record_login(user)
        logger.info(f"User logged in: user_id={user.id} role={user.role.value}")

        return TokenResponse(
            access_token=create_access_token(user.id, role=user.role.value),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        )

    # ============================================================
    # CALLER FROM TOKEN
    # ============================================================

    async def get_current_user(self, token: str) -> User:
        claims = decode_token(token)
        if not claims:
            raise UnauthorizedError("Invalid or expired token")

        try:
            user_id = UUID(claims.get("sub"))
        except (TypeError, ValueError):
            raise UnauthorizedError("Invalid or expired token")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UnauthorizedError("User not found")
        if not user.is_active:
            raise UnauthorizedError("User account is deactivated")

        return user
