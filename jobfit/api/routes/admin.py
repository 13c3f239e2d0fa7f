"""
Admin endpoints: login, dashboard, user approval and plan grants.

Every route except login requires the admin session cookie.
"""
import hmac
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, require_admin, start_admin_session
from jobfit.core.clock import Clock, get_clock
from jobfit.core.config import ADMIN_COOKIE_NAME, ADMIN_PASSWORD
from jobfit.schemas.admin import ApproveUserRequest, GrantPlanRequest
from jobfit.schemas.auth import AdminLoginRequest
from jobfit.services.admin_service import get_dashboard, grant_plan_to_user, set_user_approval

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login")
def admin_login(payload: AdminLoginRequest, response: Response):
    if not hmac.compare_digest(payload.password.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8")):
        logger.warning("Admin login failed")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Password")
    
    start_admin_session(response)
    logger.info("Admin logged in")
    return {"success": True}


@router.post("/logout")
def admin_logout(response: Response):
    response.delete_cookie(ADMIN_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/dashboard", dependencies=[Depends(require_admin)])
def admin_dashboard(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    """Totals, average match score, recent generations and users."""
    return get_dashboard(db, clock())


@router.post("/approve-user", dependencies=[Depends(require_admin)])
def approve_user(payload: ApproveUserRequest, db: Session = Depends(get_db)):
    user = set_user_approval(db, payload.userId, payload.action)
    return {"success": True, "user": {"id": user.id, "status": user.status.value}}


@router.post("/grant-plan", dependencies=[Depends(require_admin)])
def grant_plan(payload: GrantPlanRequest, db: Session = Depends(get_db)):
    """
    Grant FREE or PRO to a user.
    
    Sets the plan, opens full access and zeroes both quota counters.
    """
    if not payload.userId or not payload.plan:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID and plan are required",
        )
    
    user = grant_plan_to_user(db, payload.userId, payload.plan)
    return {
        "success": True,
        "message": f"{user.plan.value} plan access granted successfully",
        "user": {
            "id": user.id,
            "email": user.email,
            "plan": user.plan.value,
            "hasFullAccess": user.has_full_access,
            "creditsUsed": user.credits_used,
            "dailyResumeCount": user.daily_resume_count,
        },
    }
