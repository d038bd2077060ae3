"""
Registration, login and the caller's own account.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...common.config_loader import Settings
from ...db.models import User
from ...services import accounts
from ...services.security import create_access_token
from ..dependencies import get_current_user, get_session, get_settings
from ..schemas import LoginInput, PasswordInput, ProfileInput, RegisterInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(settings: Settings, user: User) -> str:
    return create_access_token(settings, user.id, user.email, is_admin=user.is_admin)


@router.post("/register", status_code=201)
def register(
    payload: RegisterInput,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = accounts.register_user(
        session,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
        business_name=payload.business_name,
        business_address=payload.business_address,
        phone_number=payload.phone_number,
        legal_declaration=payload.legal_declaration,
    )
    session.commit()
    return {
        "message": "User registered successfully",
        "token": _token_for(settings, user),
        "user": user.to_dict(),
    }


@router.post("/login")
def login(
    payload: LoginInput,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = accounts.authenticate(session, payload.email, payload.password)
    logger.info("User %s logged in", user.email)
    return {
        "message": "Login successful",
        "token": _token_for(settings, user),
        "user": user.to_dict(),
    }


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}


@router.put("/profile")
def update_profile(
    payload: ProfileInput,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    accounts.update_profile(
        session,
        user,
        display_name=payload.display_name,
        business_name=payload.business_name,
        business_address=payload.business_address,
        phone_number=payload.phone_number,
    )
    session.commit()
    return {"message": "Profile updated successfully", "user": user.to_dict()}


@router.put("/password")
def change_password(
    payload: PasswordInput,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    accounts.change_password(session, user, payload.current_password, payload.new_password)
    session.commit()
    return {"message": "Password updated successfully"}
