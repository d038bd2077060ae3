"""
Password hashing and session tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..common.config_loader import Settings
from ..common.errors import Forbidden

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    settings: Settings,
    user_id: str,
    email: str,
    is_admin: bool = False,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Signed, time-limited token carrying the user id, email and admin flag."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims = {"sub": user_id, "email": email, "is_admin": is_admin, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        Forbidden: If the token is malformed, tampered with or expired
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise Forbidden("Invalid or expired token") from e

    if not claims.get("sub"):
        raise Forbidden("Invalid or expired token")
    return claims
