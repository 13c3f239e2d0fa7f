from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from jobfit.db.base import Base


class SystemActivity(Base):
    """Audit trail of account-level actions (signup, approval, plan grants, deletion)."""
    __tablename__ = "system_activity"

    id = Column(Integer, primary_key=True, index=True)
    # Not a foreign key: the trail outlives deleted accounts
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String, nullable=False, index=True)  # SIGN_UP, APPROVE, REJECT, GRANT_PLAN, DELETE_ACCOUNT
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
