"""
User administration and profile endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Literal, Optional
import logging

from app.api.deps import PageParams, admin_only, current_user, get_page_params
from app.database import get_db
from app.schemas.auth import UserData
from app.schemas.common import ApiResponse
from app.schemas.user import AdminUserUpdate, ProfileUpdate, UserListData, UserStatistics
from app.services.auth_service import RequestContext
from app.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[UserListData])
async def list_users(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = Query(None),
    role: Optional[Literal["admin", "user"]] = Query(None),
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    data = UserService(db).list_users(
        page=paging.page, limit=paging.limit, search=search, role=role
    )
    return {"success": True, "data": data}


@router.get("/stats/overview", response_model=ApiResponse[UserStatistics])
async def user_statistics(
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """
    Account statistics

    - Total and active accounts
    - Accounts per role
    - Registrations in the last 30 days
    """
    return {"success": True, "data": UserService(db).get_statistics()}


@router.get("/{user_id}", response_model=ApiResponse[UserData])
async def get_user(
    user_id: int,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": {"user": UserService(db).get_user(user_id)}}


@router.put("/profile", response_model=ApiResponse[UserData])
async def update_profile(
    payload: ProfileUpdate,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    user = UserService(db).update_profile(context.user_id, payload)
    return {"success": True, "message": "Profile updated successfully", "data": {"user": user}}


@router.put("/{user_id}", response_model=ApiResponse[UserData])
async def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    user = UserService(db).update_user(context.user_id, user_id, payload)
    return {"success": True, "message": "User updated successfully", "data": {"user": user}}


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def deactivate_user(
    user_id: int,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Deactivate an account; history is kept"""
    UserService(db).deactivate_user(context.user_id, user_id)
    return {"success": True, "message": "User deactivated successfully"}
