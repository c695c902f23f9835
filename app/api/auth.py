"""
Registration, login and account endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.api.deps import current_user, get_settings
from app.config import Settings
from app.database import get_db
from app.schemas.auth import AuthData, ChangePasswordRequest, LoginRequest, RegisterRequest, UserData
from app.schemas.common import ApiResponse
from app.services.auth_service import AuthService, RequestContext
from app.services.user_service import user_to_dict

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
async def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Create an account

    - Email must be unique
    - Registering as admin requires the admin passcode
    """
    user, token = AuthService(db, settings).register(payload)
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": user_to_dict(user), "token": token},
    }


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    user, token = AuthService(db, settings).login(payload.email, payload.password)
    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": user_to_dict(user), "token": token},
    }


@router.get("/me", response_model=ApiResponse[UserData])
async def me(
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    user = AuthService(db, settings).get_user(context.user_id)
    return {"success": True, "data": {"user": user_to_dict(user)}}


@router.put("/change-password", response_model=ApiResponse[None])
async def change_password(
    payload: ChangePasswordRequest,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    AuthService(db, settings).change_password(
        context.user_id, payload.current_password, payload.new_password
    )
    return {"success": True, "message": "Password changed successfully"}
