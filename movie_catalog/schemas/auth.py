from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from datetime import datetime
from typing import Optional
import re


def ensure_password_strength(password: str) -> str:
    """Validate password complexity requirements."""
    if len(password.encode('utf-8')) > 72:
        raise ValueError('Password cannot be longer than 72 bytes')
    if not re.search(r'[A-Za-z]', password):
        raise ValueError('Password must contain at least one letter')
    if not re.search(r'[0-9]', password):
        raise ValueError('Password must contain at least one number')
    return password


# Schema for user registration
class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    user_name: str = Field(..., min_length=3, max_length=30, pattern=r'^[a-zA-Z0-9]+$')

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return ensure_password_strength(v)

    @field_validator('user_name', mode='before')
    @classmethod
    def strip_user_name(cls, v):
        return v.strip() if isinstance(v, str) else v


# Schema for user login
class UserLogin(BaseModel):
    email: EmailStr
    password: str


# Schema for user response
class UserResponse(BaseModel):
    id: int
    email: str
    user_name: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
