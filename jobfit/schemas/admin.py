"""
Pydantic schemas for admin endpoints.
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field


class GrantPlanRequest(BaseModel):
    """Body of POST /api/admin/grant-plan. Validation of values happens in the route."""
    userId: Optional[int] = Field(None, description="Target user ID")
    plan: Optional[str] = Field(None, description="FREE or PRO")


class ApproveUserRequest(BaseModel):
    userId: int
    action: Literal["APPROVE", "REJECT"]
