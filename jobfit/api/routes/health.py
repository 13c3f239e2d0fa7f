"""
Health check endpoint for deployment monitoring.
"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from jobfit.db.session import SessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Returns 200 with status "healthy", or "degraded" when the database is unreachable.
    """
    status = "healthy"
    
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Health check database error: {e}")
        db_status = "error"
        status = "degraded"
    finally:
        db.close()
    
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": db_status,
        "service": "JobFit Pro API",
    }
