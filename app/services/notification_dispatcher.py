# app/services/notification_dispatcher.py

import logging
from typing import List, Optional, Union

from sqlalchemy import event
from sqlalchemy.orm import Session

from app.crud import crud_notification
from app.models.notification import Notification, NotificationType
from app.schemas.common import Page, PaginationParams
from app.schemas.notification import Notification as NotificationOut
from app.services.push_channel import PushDispatcher, PushEvent
from app.utils.enums import parse_choice

logger = logging.getLogger(__name__)

PENDING_PUSH_KEY = "pending_push_events"
PUSH_LISTENER_KEY = "push_listener_installed"


def to_notification_dto(notification: Notification) -> NotificationOut:
    actor = notification.actor
    return NotificationOut(
        id=notification.id,
        type=notification.type.value,
        message=notification.message,
        reference_id=notification.reference_id,
        is_read=notification.is_read,
        created_at=notification.created_at,
        actor_id=notification.actor_id,
        actor_username=actor.username if actor else None,
        actor_display_name=actor.display_name if actor else None,
        actor_profile_picture_url=actor.profile_picture_url if actor else None,
    )


class NotificationDispatcher:
    """
    Records notifications and forwards them to the push channel.

    ``notify`` only stages a row in the caller's session; the caller owns the
    commit. Push events queued during a transaction are handed to the push
    dispatcher once that transaction commits and are dropped if it rolls back,
    so a client is never told about a notification that was not stored.
    """

    def __init__(self, push: PushDispatcher):
        self.push = push

    def notify(
        self,
        db: Session,
        recipient_id: int,
        actor_id: int,
        notification_type: Union[NotificationType, str],
        message: str,
        reference_id: Optional[int] = None,
    ) -> Optional[Notification]:
        if recipient_id == actor_id:
            logger.debug(f"Skipping self-notification for user {actor_id}")
            return None

        parsed_type = parse_choice(NotificationType, notification_type, "notification type")
        notification = crud_notification.create_notification(
            db,
            user_id=recipient_id,
            actor_id=actor_id,
            notification_type=parsed_type,
            message=message,
            reference_id=reference_id,
        )
        self._queue_push(db, PushEvent(
            recipient_id=recipient_id,
            type=parsed_type.value,
            message=message,
            reference_id=reference_id,
        ))
        return notification

    def _queue_push(self, db: Session, push_event: PushEvent) -> None:
        db.info.setdefault(PENDING_PUSH_KEY, []).append(push_event)
        if not db.info.get(PUSH_LISTENER_KEY):
            event.listen(db, "after_commit", self._publish_pending)
            event.listen(db, "after_rollback", self._discard_pending)
            db.info[PUSH_LISTENER_KEY] = True

    def _publish_pending(self, db: Session) -> None:
        pending: List[PushEvent] = db.info.pop(PENDING_PUSH_KEY, [])
        for push_event in pending:
            self.push.publish(push_event)

    def _discard_pending(self, db: Session) -> None:
        dropped = db.info.pop(PENDING_PUSH_KEY, [])
        if dropped:
            logger.info(f"Discarded {len(dropped)} push event(s) after rollback")

    def list_notifications(self, db: Session, user_id: int, pagination: PaginationParams) -> Page[NotificationOut]:
        notifications, total_count = crud_notification.get_user_notifications(
            db, user_id, skip=pagination.skip, limit=pagination.page_size
        )
        return Page[NotificationOut](
            items=[to_notification_dto(n) for n in notifications],
            total_count=total_count,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    def unread_count(self, db: Session, user_id: int) -> int:
        return crud_notification.count_unread(db, user_id)

    def mark_read(self, db: Session, user_id: int, notification_id: int) -> None:
        """Idempotent; unknown ids and other users' notifications are ignored"""
        notification = crud_notification.get_notification(db, notification_id)
        if notification is None or notification.user_id != user_id or notification.is_read:
            return
        try:
            notification.is_read = True
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error marking notification {notification_id} as read: {str(e)}")
            raise

    def mark_all_read(self, db: Session, user_id: int) -> int:
        unread = crud_notification.get_unread_notifications(db, user_id)
        if not unread:
            return 0
        try:
            for notification in unread:
                notification.is_read = True
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error marking notifications as read for user {user_id}: {str(e)}")
            raise
        logger.info(f"Marked {len(unread)} notification(s) as read for user {user_id}")
        return len(unread)
