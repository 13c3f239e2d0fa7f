"""
Unit tests for the generation access gate.
"""
import pytest
from datetime import date, datetime

from jobfit.core.access_gate import (
    REASON_DAILY_LIMIT,
    REASON_NO_FULL_ACCESS,
    REASON_PLAN_LIMIT,
    check_access,
    effective_daily_count,
    enforce_access,
    is_new_day,
)
from jobfit.core.errors import AccessDeniedError, AuthRequiredError
from jobfit.db.models.user import User, PlanType

NOW = datetime(2026, 3, 10, 9, 0, 0)


def _user(**overrides):
    values = dict(
        id=1,
        email="gate@example.com",
        plan=PlanType.FREE,
        has_full_access=True,
        credits_used=0,
        daily_resume_count=0,
        daily_resume_limit=70,
        last_resume_date=None,
    )
    values.update(overrides)
    return User(**values)


def test_anonymous_is_allowed():
    decision = check_access(None, NOW)
    assert decision.allowed is True
    assert decision.anonymous is True


def test_anonymous_refused_when_login_required():
    with pytest.raises(AuthRequiredError) as exc_info:
        enforce_access(None, NOW, require_login=True)
    assert exc_info.value.status_code == 401


def test_no_full_access_denied_first():
    """Full-access check wins even when the other limits are also exceeded."""
    user = _user(has_full_access=False, credits_used=5, daily_resume_count=70, last_resume_date=NOW.date())
    decision = check_access(user, NOW)
    assert decision.allowed is False
    assert decision.reason == REASON_NO_FULL_ACCESS


def test_daily_limit_checked_before_plan_limit():
    user = _user(credits_used=5, daily_resume_count=70, last_resume_date=NOW.date())
    assert check_access(user, NOW).reason == REASON_DAILY_LIMIT


def test_daily_limit_resets_on_new_day():
    user = _user(daily_resume_count=70, last_resume_date=date(2026, 3, 9))
    assert effective_daily_count(user, NOW) == 0
    assert check_access(user, NOW).allowed is True


def test_plan_limit_for_free_user():
    user = _user(credits_used=5)
    decision = check_access(user, NOW)
    assert decision.allowed is False
    assert decision.reason == REASON_PLAN_LIMIT
    assert "plan" in decision.message


def test_none_plan_has_no_credits():
    user = _user(plan=PlanType.NONE)
    assert check_access(user, NOW).reason == REASON_PLAN_LIMIT


def test_pro_user_allowed_with_many_credits_used():
    user = _user(plan=PlanType.PRO, credits_used=5000)
    assert check_access(user, NOW).allowed is True


def test_custom_daily_limit():
    user = _user(daily_resume_limit=3, daily_resume_count=3, last_resume_date=NOW.date())
    assert check_access(user, NOW).reason == REASON_DAILY_LIMIT


def test_enforce_access_raises_with_reason():
    user = _user(has_full_access=False)
    with pytest.raises(AccessDeniedError) as exc_info:
        enforce_access(user, NOW)
    
    error = exc_info.value
    assert error.status_code == 403
    body = error.to_dict()
    assert body["error"] == "Access Restricted"
    assert body["reason"] == REASON_NO_FULL_ACCESS
    assert "message" in body


def test_is_new_day_accepts_datetimes():
    assert is_new_day(None, NOW) is True
    assert is_new_day(datetime(2026, 3, 10, 0, 1), NOW) is False
    assert is_new_day(datetime(2026, 3, 9, 23, 59), NOW) is True


def test_zero_daily_limit_blocks_generation():
    """A stored limit of 0 is a real limit, not a missing value."""
    user = _user(daily_resume_limit=0)
    decision = check_access(user, NOW)
    assert decision.allowed is False
    assert decision.reason == REASON_DAILY_LIMIT


def test_missing_daily_limit_uses_default():
    user = _user(daily_resume_limit=None, daily_resume_count=69, last_resume_date=NOW.date())
    assert check_access(user, NOW).allowed is True
