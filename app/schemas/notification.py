"""
Pydantic schemas for notifications
"""
from datetime import datetime
from pydantic import Field
from typing import List, Optional

from app.schemas.common import CamelModel


class NotifyRequest(CamelModel):
    user_id: int = Field(..., gt=0)
    message: str = Field(..., min_length=1, max_length=2000)


class MarkReadRequest(CamelModel):
    notification_id: int = Field(..., gt=0)


class NotificationOut(CamelModel):
    id: int
    message: str
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationListData(CamelModel):
    notifications: List[NotificationOut]
