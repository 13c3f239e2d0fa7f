"""
Database models module.

Imports every model so they are registered with SQLAlchemy's Base.metadata
before table creation and Alembic autogeneration.
"""
from jobfit.db.models.user import User, UserStatus, PlanType
from jobfit.db.models.resume_generation import ResumeGeneration, GenerationStatus
from jobfit.db.models.login_history import LoginHistory
from jobfit.db.models.system_activity import SystemActivity

__all__ = [
    "User",
    "UserStatus",
    "PlanType",
    "ResumeGeneration",
    "GenerationStatus",
    "LoginHistory",
    "SystemActivity",
]
