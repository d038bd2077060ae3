"""
Request-scoped dependencies: settings, database session, listing cache and
the authenticated user.
"""

from typing import Iterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from ..common.cache import TTLCache
from ..common.config_loader import Settings
from ..common.errors import Forbidden, Unauthorized
from ..db.models import User
from ..services.products import ProductService
from ..services.security import decode_access_token


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_client_factory(request: Request):
    return request.app.state.client_factory


def get_session(request: Request) -> Iterator[Session]:
    session = request.app.state.session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_product_service(
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_cache),
) -> ProductService:
    return ProductService(session, cache)


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Access token required")

    claims = decode_access_token(settings, authorization.split(" ", 1)[1].strip())

    user = session.get(User, claims["sub"])
    if user is None:
        raise Forbidden("Invalid or expired token")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Admin access required")
    return user
