"""
Vendor accounts: registration, login, profile and password changes.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..common.constants import MIN_PASSWORD_LENGTH
from ..common.errors import NotFound, Unauthorized, ValidationFailed
from ..db.models import User
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _check_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.scalar(select(User).where(func.lower(User.email) == normalize_email(email)))


def get_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def register_user(
    session: Session,
    email: str,
    password: str,
    display_name: str,
    business_name: Optional[str] = None,
    business_address: Optional[str] = None,
    phone_number: Optional[str] = None,
    legal_declaration: bool = False,
    is_admin: bool = False,
) -> User:
    """
    Create a vendor account.

    Raises:
        ValidationFailed: Duplicate email, short password or missing name
    """
    email = normalize_email(email)
    if not email or not display_name:
        raise ValidationFailed("Email and display name are required")
    _check_password(password)

    if find_user_by_email(session, email) is not None:
        raise ValidationFailed("Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(password),
        display_name=display_name,
        business_name=business_name or None,
        business_address=business_address or None,
        phone_number=phone_number or None,
        legal_declaration=bool(legal_declaration),
        is_admin=is_admin,
    )
    session.add(user)
    session.flush()

    logger.info("Registered user %s", user.email)
    return user


def authenticate(session: Session, email: str, password: str) -> User:
    """
    Check login credentials.

    Raises:
        Unauthorized: Unknown email or wrong password (same message for both)
    """
    user = find_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthorized("Invalid email or password")
    return user


def update_profile(
    session: Session,
    user: User,
    display_name: str,
    business_name: Optional[str] = None,
    business_address: Optional[str] = None,
    phone_number: Optional[str] = None,
) -> User:
    if not display_name:
        raise ValidationFailed("Display name is required")

    user.display_name = display_name
    user.business_name = business_name or None
    user.business_address = business_address or None
    user.phone_number = phone_number or None
    session.flush()
    return user


def change_password(session: Session, user: User, current_password: str, new_password: str) -> None:
    """
    Replace the user's password after checking the current one.

    Raises:
        ValidationFailed: Missing fields, wrong current password or short new password
    """
    if not current_password or not new_password:
        raise ValidationFailed("Current password and new password are required")
    _check_password(new_password)

    if not verify_password(current_password, user.password_hash):
        raise ValidationFailed("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    session.flush()
    logger.info("Password updated for %s", user.email)


def promote_to_admin(session: Session, user_id: str) -> User:
    user = get_user(session, user_id)
    user.is_admin = True
    session.flush()
    logger.info("User %s promoted to admin", user.email)
    return user


def set_documents_verified(session: Session, user_id: str, verified: bool) -> User:
    user = get_user(session, user_id)
    user.documents_verified = bool(verified)
    session.flush()
    return user
