import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, start_user_session
from jobfit.core.config import SESSION_COOKIE_NAME
from jobfit.schemas.auth import SignupRequest, LoginRequest
from jobfit.services.user_service import authenticate_user, create_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_client_ip(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop from a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


# ✅ USER SIGNUP
@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    user = create_user(db, payload.name, payload.email, payload.password, payload.phone)
    return {"success": True, "userId": user.id}


# ✅ LOGIN: sets the HTTP-only session cookie
@router.post("/login")
def login(payload: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password, get_client_ip(request))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    
    start_user_session(response, user)
    return {"success": True}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"success": True}
