"""
Quota ledger for resume generation.

Handles the daily rollover, credit consumption and plan grants.
Counter updates are single conditional UPDATE statements so two concurrent
requests from the same user cannot both slip past a limit.
"""
import base64
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobfit.core.access_gate import (
    REASON_DAILY_LIMIT,
    DENIAL_MESSAGES,
    check_access,
    effective_daily_count,
    get_daily_limit,
)
from jobfit.core.config import DEFAULT_DAILY_RESUME_LIMIT
from jobfit.core.errors import AccessDeniedError
from jobfit.core.plan_limits import get_plan_credit_limit, normalize_plan
from jobfit.db.models.resume_generation import ResumeGeneration, GenerationStatus
from jobfit.db.models.user import User

logger = logging.getLogger(__name__)


def apply_day_rollover(db: Session, user: User, current: datetime) -> bool:
    """
    Reset the daily counter the first time a user generates on a new day.

    Idempotent: the WHERE clause only matches while the stored date is
    older than today, so the reset happens at most once per day.

    Args:
        db: Database session
        user: User being charged
        current: Current local instant

    Returns:
        True if the counter was reset by this call
    """
    today = current.date()
    result = db.execute(
        update(User)
        .where(
            User.id == user.id,
            or_(User.last_resume_date.is_(None), User.last_resume_date < today),
        )
        .values(daily_resume_count=0, last_resume_date=today)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(user)

    rolled_over = result.rowcount > 0
    if rolled_over:
        logger.info(f"Daily counter reset: user_id={user.id}, date={today.isoformat()}")
    return rolled_over


def consume_generation_credit(db: Session, user: User, current: datetime) -> bool:
    """
    Atomically charge one generation against the user's limits.

    Increments ``credits_used`` and ``daily_resume_count`` and stamps
    ``last_resume_date`` in one statement that re-checks both limits.
    Does not commit; the caller owns the transaction.

    Returns:
        True if the user was charged, False if a limit was already reached
    """
    credit_limit = get_plan_credit_limit(user.plan)
    daily_limit = func.coalesce(User.daily_resume_limit, DEFAULT_DAILY_RESUME_LIMIT)
    result = db.execute(
        update(User)
        .where(
            User.id == user.id,
            User.credits_used < credit_limit,
            User.daily_resume_count < daily_limit,
        )
        .values(
            credits_used=User.credits_used + 1,
            daily_resume_count=User.daily_resume_count + 1,
            last_resume_date=current.date(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def record_generation(
    db: Session,
    user: Optional[User],
    *,
    job_title: str,
    company_name: str,
    match_score: int,
    original_name: str,
    document: bytes,
    current: datetime,
    warnings: List[str],
) -> Optional[ResumeGeneration]:
    """
    Persist a SUCCESS generation record and charge the user's quota.

    Both writes share one transaction: a record exists exactly when the
    user was charged. Anonymous generations are recorded without a charge.

    Storage failures are logged and swallowed (a warning is appended) because
    the document has already been produced and is still delivered.

    Raises:
        AccessDeniedError: a concurrent request consumed the last credit

    Returns:
        The stored record, or None if bookkeeping failed
    """
    record = ResumeGeneration(
        user_id=user.id if user else None,
        user_email=user.email if user else "Anonymous",
        job_title=job_title,
        company_name=company_name,
        match_score=match_score,
        original_name=original_name,
        status=GenerationStatus.SUCCESS,
        file_data=base64.b64encode(document).decode("ascii"),
        created_at=current,
        updated_at=current,
    )

    try:
        db.add(record)
        db.flush()

        if user is not None and not consume_generation_credit(db, user, current):
            db.rollback()
            db.refresh(user)
            decision = check_access(user, current)
            reason = decision.reason or REASON_DAILY_LIMIT
            error, message = DENIAL_MESSAGES[reason]
            logger.warning(f"Quota race lost: user_id={user.id}, reason={reason}")
            raise AccessDeniedError(reason=reason, error=error, message=message)

        db.commit()
        db.refresh(record)
        if user is not None:
            db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Generation bookkeeping failed: user_id={user.id if user else None}, error={e}",
            exc_info=True,
        )
        warnings.append("The resume was generated but could not be saved to your history.")
        return None

    logger.info(
        f"Generation recorded: record_id={record.id}, user_id={record.user_id}, "
        f"match_score={match_score}, credits_used={user.credits_used if user else 'n/a'}"
    )
    return record


def grant_plan(db: Session, user: User, plan) -> User:
    """
    Assign a plan, open full access and zero both counters.

    Idempotent: granting the same plan twice yields the same state.
    """
    user.plan = normalize_plan(plan)
    user.has_full_access = True
    user.credits_used = 0
    user.daily_resume_count = 0
    db.commit()
    db.refresh(user)

    logger.info(f"Plan granted: user_id={user.id}, plan={user.plan.value}")
    return user


def get_quota_summary(user: User, current: datetime) -> Dict:
    """
    Quota figures for the user dashboard.

    Daily usage is rollover-aware: a stale counter from a previous day reads as 0.
    """
    plan = normalize_plan(user.plan)
    credit_limit = get_plan_credit_limit(plan)
    credits_used = user.credits_used or 0
    daily_limit = get_daily_limit(user)
    daily_used = effective_daily_count(user, current)

    return {
        "plan": plan.value,
        "hasFullAccess": bool(user.has_full_access),
        "credits": {
            "limit": credit_limit,
            "used": credits_used,
            "remaining": max(0, credit_limit - credits_used),
        },
        "daily": {
            "limit": daily_limit,
            "used": daily_used,
            "remaining": max(0, daily_limit - daily_used),
        },
        "lastResumeDate": user.last_resume_date.isoformat() if user.last_resume_date else None,
    }
