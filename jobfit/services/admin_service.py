"""
Admin dashboard, user approval and plan management.
"""
import logging
from datetime import datetime
from typing import Dict, List

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobfit.core.clock import months_before
from jobfit.core.config import RESUME_RETENTION_MONTHS
from jobfit.core.plan_limits import GRANTABLE_PLANS, get_plan_credit_limit
from jobfit.db.models.resume_generation import ResumeGeneration
from jobfit.db.models.user import User, UserStatus, PlanType
from jobfit.services import quota_service
from jobfit.services.user_service import log_activity

logger = logging.getLogger(__name__)

DASHBOARD_GENERATION_LIMIT = 1000
DASHBOARD_USER_LIMIT = 10000


def prune_expired_generations(db: Session, current: datetime, months: int = RESUME_RETENTION_MONTHS) -> int:
    """
    Delete generation records older than the retention window.

    Best-effort: failures are logged and the sweep reports 0 deletions.

    Returns:
        Number of records deleted
    """
    cutoff = months_before(current, months)
    try:
        deleted = (
            db.query(ResumeGeneration)
            .filter(ResumeGeneration.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Retention sweep failed: {e}", exc_info=True)
        return 0

    if deleted:
        logger.info(f"Retention sweep removed {deleted} generation(s) older than {cutoff.isoformat()}")
    return deleted


def _serialize_generation(g: ResumeGeneration) -> Dict:
    return {
        "id": g.id,
        "createdAt": g.created_at.isoformat() if g.created_at else None,
        "userEmail": g.user_email,
        "originalName": g.original_name,
        "matchScore": g.match_score,
        "status": g.status.value,
    }


def _serialize_user(u: User) -> Dict:
    return {
        "id": u.id,
        "email": u.email,
        "name": u.name,
        "phone": u.phone,
        "status": u.status.value,
        "plan": u.plan.value,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "hasFullAccess": u.has_full_access,
        "dailyResumeCount": u.daily_resume_count,
        "dailyResumeLimit": u.daily_resume_limit,
        "creditsUsed": u.credits_used,
        "creditLimit": get_plan_credit_limit(u.plan),
    }


def get_dashboard(db: Session, current: datetime) -> Dict:
    """
    Admin overview: totals, average match score, recent generations and users.

    Runs the retention sweep first so the figures exclude expired records.
    """
    pruned = prune_expired_generations(db, current)

    total_resumes = db.query(func.count(ResumeGeneration.id)).scalar() or 0
    total_users = db.query(func.count(User.id)).scalar() or 0
    avg_score = db.query(func.avg(ResumeGeneration.match_score)).scalar()

    generations: List[ResumeGeneration] = (
        db.query(ResumeGeneration)
        .order_by(ResumeGeneration.created_at.desc())
        .limit(DASHBOARD_GENERATION_LIMIT)
        .all()
    )
    users: List[User] = (
        db.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(DASHBOARD_USER_LIMIT)
        .all()
    )

    return {
        "totalResumes": total_resumes,
        "totalUsers": total_users,
        "avgScore": round(float(avg_score or 0)),
        "prunedCount": pruned,
        "logs": [_serialize_generation(g) for g in generations],
        "users": [_serialize_user(u) for u in users],
    }


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def set_user_approval(db: Session, user_id: int, action: str) -> User:
    """APPROVE -> APPROVED, REJECT -> REJECTED."""
    user = get_user_or_404(db, user_id)
    user.status = UserStatus.APPROVED if action == "APPROVE" else UserStatus.REJECTED
    log_activity(db, user.id, action, f"Admin set status to {user.status.value}")
    db.commit()
    db.refresh(user)

    logger.info(f"User {action.lower()}d: user_id={user.id}")
    return user


def grant_plan_to_user(db: Session, user_id: int, plan: str) -> User:
    """
    Grant FREE or PRO: full access on, credits and daily count reset.

    Raises:
        HTTPException 400: plan is not grantable
        HTTPException 404: unknown user
    """
    plan_value = (plan or "").upper()
    if plan_value not in {p.value for p in GRANTABLE_PLANS}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid plan. Must be FREE or PRO",
        )

    user = get_user_or_404(db, user_id)
    log_activity(db, user.id, "GRANT_PLAN", f"{plan_value} plan granted")
    return quota_service.grant_plan(db, user, PlanType(plan_value))
