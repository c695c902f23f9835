"""
Notification endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.api.deps import admin_only, current_user
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.notification import MarkReadRequest, NotificationListData, NotifyRequest
from app.services.auth_service import RequestContext
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/api", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post("/notify", response_model=ApiResponse[None], status_code=201)
async def notify(
    payload: NotifyRequest,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    NotificationService(db).notify(payload.user_id, payload.message)
    return {"success": True, "message": "Notification sent"}


@router.get("/notifications", response_model=ApiResponse[NotificationListData])
async def list_notifications(
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    notifications = NotificationService(db).list_for_user(context.user_id)
    return {"success": True, "data": {"notifications": notifications}}


@router.post("/notifications/read", response_model=ApiResponse[None])
async def mark_read(
    payload: MarkReadRequest,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    NotificationService(db).mark_read(context.user_id, payload.notification_id)
    return {"success": True, "message": "Notification marked as read"}
