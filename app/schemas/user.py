"""
Pydantic schemas for user administration
"""
from pydantic import Field
from typing import List, Literal, Optional

from app.schemas.auth import UserOut
from app.schemas.common import CamelModel, Pagination


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)


class AdminUserUpdate(ProfileUpdate):
    role: Optional[Literal["admin", "user"]] = None
    is_active: Optional[bool] = None


class UserListData(CamelModel):
    items: List[UserOut]
    pagination: Pagination


class RoleCount(CamelModel):
    role: str
    count: int


class UserStatistics(CamelModel):
    """Account totals for the admin dashboard"""
    total_users: int
    active_users: int
    role_stats: List[RoleCount]
    recent_registrations: int
