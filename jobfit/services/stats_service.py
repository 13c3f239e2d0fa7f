"""
Usage statistics for the current day.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobfit.core.clock import start_of_day
from jobfit.db.models.resume_generation import ResumeGeneration, GenerationStatus
from jobfit.db.models.user import User

logger = logging.getLogger(__name__)


def count_successful_generations(
    db: Session,
    start: datetime,
    end: datetime,
    user_id: Optional[int] = None,
) -> int:
    query = db.query(func.count(ResumeGeneration.id)).filter(
        ResumeGeneration.created_at >= start,
        ResumeGeneration.created_at < end,
        ResumeGeneration.status == GenerationStatus.SUCCESS,
    )
    if user_id is not None:
        query = query.filter(ResumeGeneration.user_id == user_id)
    return query.scalar() or 0


def get_today_stats(db: Session, user: Optional[User], current: datetime) -> Dict:
    """
    System-wide and per-user generation counts for today.
    
    Args:
        db: Database session
        user: Authenticated user, or None
        current: Current local instant
        
    Returns:
        Stats dictionary for GET /api/stats/today
    """
    today = start_of_day(current)
    tomorrow = today + timedelta(days=1)
    
    stats = {
        "totalTodayCount": count_successful_generations(db, today, tomorrow),
        "userTodayCount": 0,
        "userDailyCount": 0,
        "userTotalCredits": 0,
        "lastResumeDate": None,
        "date": today.date().isoformat(),
        "isAuthenticated": False,
    }
    
    if user is not None:
        stats.update({
            "userTodayCount": count_successful_generations(db, today, tomorrow, user_id=user.id),
            "userDailyCount": user.daily_resume_count or 0,
            "userTotalCredits": user.credits_used or 0,
            "lastResumeDate": user.last_resume_date.isoformat() if user.last_resume_date else None,
            "isAuthenticated": True,
        })
    
    return stats
