"""
Security helpers

Password hashing (bcrypt) and signed bearer tokens (JWT via python-jose).
Tokens carry the user id in `sub`, the role at issue time in `role`, and a
`type` claim so only access tokens are accepted on API calls.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from quiz_engine.core.config import settings

ACCESS_TOKEN_TYPE = "access"


# =====================================================
# Passwords
# =====================================================

def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """False for empty input instead of raising inside bcrypt."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# =====================================================
# Tokens
# =====================================================

def create_access_token(
    user_id: Any,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "jti": uuid.uuid4().hex,
    }
    if role:
        claims["role"] = role

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> Optional[Dict[str, Any]]:
    """
    Return the claims of a valid, unexpired token of the expected type.

    Bad signatures, expired tokens and tokens of another type all yield None;
    callers only need to know the token is unusable.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != expected_type:
        return None
    return claims


def get_token_subject(token: str) -> Optional[str]:
    claims = decode_token(token)
    return claims.get("sub") if claims else None
