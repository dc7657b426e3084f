from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..constants import RecordStatus
from ..database import get_db
from ..models import Notification, User
from ..schemas import NotificationResponse
from ..shared.datetime_utils import utcnow
from ..shared.responses import ok

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _own_notifications(db: Session, user: User):
    return db.query(Notification).filter(
        Notification.user_id == user.id, Notification.status == RecordStatus.ACTIVE.value
    )


@router.get("")
async def get_notifications(
    unreadOnly: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the current user's notifications, newest first"""
    query = _own_notifications(db, current_user)
    if unreadOnly:
        query = query.filter(Notification.is_read.is_(False))

    notifications = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()
    unread = _own_notifications(db, current_user).filter(Notification.is_read.is_(False)).count()
    return ok(
        {
            "unreadCount": unread,
            "notifications": [NotificationResponse.from_model(n) for n in notifications],
        }
    )


@router.put("/read-all")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark every notification of the current user as read"""
    updated = (
        _own_notifications(db, current_user)
        .filter(Notification.is_read.is_(False))
        .update({Notification.is_read: True, Notification.updated_at: utcnow()}, synchronize_session=False)
    )
    db.commit()
    return ok({"updated": updated}, "Notifications marked as read")


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = _own_notifications(db, current_user).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.is_read = True
    db.commit()
    return ok(NotificationResponse.from_model(notification), "Notification marked as read")
