"""
In-app notifications for back-office staff.

Notifications are added to the caller's session and committed together with the
change that produced them, so a rolled back operation never leaves a notification behind.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..constants import NotificationType
from ..models import Notification

logger = logging.getLogger(__name__)


def notify_user(
    db: Session,
    user_id: int,
    notification_type: NotificationType,
    title: str,
    message: str,
    created_by: Optional[int] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=notification_type.value,
        title=title,
        message=message,
        created_by=created_by,
    )
    db.add(notification)
    logger.debug(f"🔔 Queued {notification_type.value} notification for user {user_id}")
    return notification


def notify_users(
    db: Session,
    user_ids: Iterable[int],
    notification_type: NotificationType,
    title: str,
    message: str,
    created_by: Optional[int] = None,
) -> int:
    """Notify every distinct user once, returns the number of notifications queued"""
    count = 0
    for user_id in sorted(set(user_ids)):
        notify_user(db, user_id, notification_type, title, message, created_by)
        count += 1
    return count
