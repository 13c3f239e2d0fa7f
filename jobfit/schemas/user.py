"""
Pydantic schemas for account self-service endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=40)


class UploadPhotoRequest(BaseModel):
    profileImage: str = Field(..., description="Image URL or data URI")
