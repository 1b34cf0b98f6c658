from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str

    @field_validator('full_name')
    @classmethod
    def full_name_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Full name is required and cannot be empty')
        return v.strip()

    @field_validator('password')
    @classmethod
    def password_min_length(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters')
        return v


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LogoutResponse(BaseModel):
    message: str
    detail: Optional[str] = None
