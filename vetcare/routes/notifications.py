"""Client notification endpoints"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..services.notification_service import get_notifications, mark_notification_read
from ..shared.schemas import Envelope, ok

router = APIRouter(prefix="/api/client/notifications", tags=["Notifications"])


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    title: str
    message: str
    related_id: Optional[int] = None
    related_type: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None


@router.get("", response_model=Envelope[list[NotificationResponse]])
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notifications = get_notifications(db, current_user.id, unread_only)
    return ok([NotificationResponse.model_validate(n) for n in notifications])


@router.post("/{notification_id}/read", response_model=Envelope[NotificationResponse])
async def read_notification(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = mark_notification_read(db, notification_id, current_user.id)
    return ok(NotificationResponse.model_validate(notification))
