import logging
from typing import Optional
from fastapi import Cookie, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from jobfit.core.config import (
    SESSION_COOKIE_NAME,
    ADMIN_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
    COOKIE_SECURE,
)
from jobfit.core.security import create_access_token, decode_access_token
from jobfit.db.session import SessionLocal
from jobfit.db.models.user import User

logger = logging.getLogger(__name__)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def set_session_cookie(response: Response, name: str, token: str):
    response.set_cookie(
        name,
        token,
        httponly=True,
        path="/",
        max_age=SESSION_MAX_AGE_SECONDS,
        samesite="lax",
        secure=COOKIE_SECURE,
    )


def start_user_session(response: Response, user: User):
    """Issue the user session cookie (JWT with the user id as subject)."""
    set_session_cookie(response, SESSION_COOKIE_NAME, create_access_token({"sub": str(user.id)}))


def start_admin_session(response: Response):
    set_session_cookie(response, ADMIN_COOKIE_NAME, create_access_token({"sub": "admin", "role": "admin"}))


def get_session_user_id(
    user_session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> Optional[int]:
    """Resolve the session cookie to a user id, or None for anonymous callers."""
    if not user_session:
        return None
    payload = decode_access_token(user_session)
    if not payload:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def get_optional_user(
    user_id: Optional[int] = Depends(get_session_user_id),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user when a valid session exists, else None."""
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_current_user_obj(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Current User object; 401 when there is no valid session."""
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(
    admin_auth: Optional[str] = Cookie(default=None, alias=ADMIN_COOKIE_NAME),
) -> bool:
    """Admin-gated routes: valid admin cookie or 401."""
    payload = decode_access_token(admin_auth) if admin_auth else None
    if not payload or payload.get("role") != "admin":
        raise HTTPException(status_code=401, detail="Unauthorized")
    return True
