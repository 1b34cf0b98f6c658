from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
import uuid

from onboarding.models.profile import ProfileRole


class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    role: ProfileRole
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileSummary(BaseModel):
    """Display fields shown next to an application"""
    id: uuid.UUID
    email: str
    full_name: str

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None

    @field_validator('full_name')
    @classmethod
    def full_name_must_not_be_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Full name cannot be empty')
        return v.strip() if v is not None else v


class AvatarUploadResponse(BaseModel):
    avatar_url: str
    message: str = "Profile photo uploaded successfully"


class AvatarDeleteResponse(BaseModel):
    message: str = "Profile photo deleted successfully"
