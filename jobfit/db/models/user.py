"""
User account model with approval state, plan and quota counters.
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from jobfit.core.config import DEFAULT_DAILY_RESUME_LIMIT
from jobfit.db.base import Base


class UserStatus(str, enum.Enum):
    """Account approval state."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class PlanType(str, enum.Enum):
    """Plan tier governing the credit ceiling."""
    NONE = "NONE"
    FREE = "FREE"
    PRO = "PRO"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)  # NULL for social-login accounts
    profile_image = Column(String, nullable=True)

    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.PENDING)
    plan = Column(Enum(PlanType), nullable=False, default=PlanType.NONE)
    has_full_access = Column(Boolean, nullable=False, default=False)

    # Quota counters
    credits_used = Column(Integer, nullable=False, default=0)
    daily_resume_count = Column(Integer, nullable=False, default=0)
    daily_resume_limit = Column(Integer, nullable=False, default=DEFAULT_DAILY_RESUME_LIMIT)
    last_resume_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    generations = relationship(
        "ResumeGeneration",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return "User"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', plan='{self.plan}')>"
