"""
Access gate for resume generation.

Decides ALLOW or DENY before any AI call is made, so a denied user never
spends external API quota. The gate only reads; the day rollover is persisted
by the quota ledger on allowed attempts.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from jobfit.core.clock import to_date
from jobfit.core.config import DEFAULT_DAILY_RESUME_LIMIT, REQUIRE_LOGIN_FOR_GENERATION
from jobfit.core.errors import AccessDeniedError, AuthRequiredError
from jobfit.core.plan_limits import get_plan_credit_limit
from jobfit.db.models.user import User

logger = logging.getLogger(__name__)

REASON_NO_FULL_ACCESS = "no_full_access"
REASON_DAILY_LIMIT = "daily_limit"
REASON_PLAN_LIMIT = "plan_limit"

DENIAL_MESSAGES = {
    REASON_NO_FULL_ACCESS: (
        "Access Restricted",
        "Your account is approved but doesn't have resume generation access yet. "
        "Access is restricted until a plan is assigned.",
    ),
    REASON_DAILY_LIMIT: (
        "Daily limit reached",
        "You have reached your daily resume generation limit. It resets tomorrow.",
    ),
    REASON_PLAN_LIMIT: (
        "Plan limit reached",
        "You have used all resume generations included in your plan. Upgrade to continue.",
    ),
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None
    anonymous: bool = False

    @property
    def message(self) -> Optional[str]:
        if self.reason is None:
            return None
        return DENIAL_MESSAGES[self.reason][1]


def is_new_day(last_resume_date, current: datetime) -> bool:
    """True when no generation happened yet on ``current``'s calendar day."""
    last_day = to_date(last_resume_date)
    return last_day is None or last_day < current.date()


def effective_daily_count(user: User, current: datetime) -> int:
    """Daily counter as the gate sees it: 0 on a new day, else the stored value."""
    if is_new_day(user.last_resume_date, current):
        return 0
    return user.daily_resume_count or 0


def get_daily_limit(user: User) -> int:
    """Stored limit, or the default when unset. A stored 0 blocks generation."""
    if user.daily_resume_limit is None:
        return DEFAULT_DAILY_RESUME_LIMIT
    return user.daily_resume_limit


def check_access(user: Optional[User], current: datetime) -> AccessDecision:
    """
    Evaluate the generation gate for a user.
    
    Checks, in order: anonymous pass-through, full-access flag,
    daily limit (rollover-aware), plan credit limit.
    
    Args:
        user: Acting user, or None for anonymous callers
        current: Current local instant
        
    Returns:
        AccessDecision with a stable reason code on denial
    """
    if user is None:
        return AccessDecision(allowed=True, anonymous=True)
    
    if not user.has_full_access:
        return AccessDecision(allowed=False, reason=REASON_NO_FULL_ACCESS)
    
    if effective_daily_count(user, current) >= get_daily_limit(user):
        return AccessDecision(allowed=False, reason=REASON_DAILY_LIMIT)
    
    if (user.credits_used or 0) >= get_plan_credit_limit(user.plan):
        return AccessDecision(allowed=False, reason=REASON_PLAN_LIMIT)
    
    return AccessDecision(allowed=True)


def enforce_access(
    user: Optional[User],
    current: datetime,
    require_login: bool = REQUIRE_LOGIN_FOR_GENERATION,
) -> AccessDecision:
    """
    Enforce the generation gate.
    
    Raises:
        AuthRequiredError: anonymous caller while login is required
        AccessDeniedError: gate denied the user
    """
    if user is None and require_login:
        raise AuthRequiredError(message="Please log in to generate resumes.")
    
    decision = check_access(user, current)
    if not decision.allowed:
        error, message = DENIAL_MESSAGES[decision.reason]
        logger.warning(
            f"Generation denied: user_id={user.id}, reason={decision.reason}, "
            f"plan={user.plan}, credits_used={user.credits_used}, "
            f"daily_count={user.daily_resume_count}"
        )
        raise AccessDeniedError(reason=decision.reason, error=error, message=message)
    
    return decision
