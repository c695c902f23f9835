"""
Pydantic schemas for registration, login and profile
"""
from datetime import datetime
from pydantic import EmailStr, Field
from typing import Literal, Optional

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Schema for creating an account"""
    email: EmailStr
    password: str = Field(..., min_length=6, description="Plain-text password")
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    role: Literal["admin", "user"] = "user"
    admin_passcode: Optional[str] = Field(None, description="Required when role is admin")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserOut(CamelModel):
    """Public view of a user account"""
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool = True
    created_at: Optional[datetime] = None


class AuthData(CamelModel):
    user: UserOut
    token: str


class UserData(CamelModel):
    user: UserOut
