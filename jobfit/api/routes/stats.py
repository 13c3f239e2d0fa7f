"""
Usage statistics endpoint.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, get_optional_user
from jobfit.core.clock import Clock, get_clock
from jobfit.db.models.user import User
from jobfit.services.stats_service import get_today_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("/today", status_code=status.HTTP_200_OK)
def today_stats(
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Resumes generated today, system-wide and (when logged in) for the caller.
    
    Authentication is optional; anonymous callers get system figures only.
    """
    return {"success": True, "stats": get_today_stats(db, user, clock())}
