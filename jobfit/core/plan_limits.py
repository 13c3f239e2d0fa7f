"""
Plan-based credit limits.

Single source of truth for the credit ceiling of each plan. Credits are
counted per plan period: the counter is reset only when an admin grants a plan.
"""
from typing import Dict, Tuple

from jobfit.core.config import FREE_PLAN_CREDIT_LIMIT, PRO_PLAN_CREDIT_LIMIT
from jobfit.db.models.user import PlanType

PLAN_CREDIT_LIMITS: Dict[PlanType, int] = {
    PlanType.NONE: 0,
    PlanType.FREE: FREE_PLAN_CREDIT_LIMIT,
    PlanType.PRO: PRO_PLAN_CREDIT_LIMIT,
}

# Plans an admin may grant
GRANTABLE_PLANS: Tuple[PlanType, ...] = (PlanType.FREE, PlanType.PRO)


def normalize_plan(plan) -> PlanType:
    """Coerce a stored/requested plan value into ``PlanType`` (unknown -> NONE)."""
    if isinstance(plan, PlanType):
        return plan
    try:
        return PlanType(str(plan).upper())
    except ValueError:
        return PlanType.NONE


def get_plan_credit_limit(plan) -> int:
    """
    Get the credit ceiling for a plan.
    
    Args:
        plan: PlanType or plan name (case-insensitive)
        
    Returns:
        Maximum number of generations before the plan is exhausted
    """
    return PLAN_CREDIT_LIMITS[normalize_plan(plan)]
