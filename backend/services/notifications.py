import logging
from typing import Sequence

from sqlmodel import Session, delete, func, select, update

import settings
from exceptions import NotFound
from models.notifications import (
    FriendRequestData,
    MessageData,
    Notification,
    NotificationData,
    NotificationType,
)
from services.realtime import feed

logger = logging.getLogger("matchup.notifications")

NOTIFICATIONS_TABLE = Notification.__tablename__


def add_notification(
    session: Session,
    *,
    user_id: str,
    title: str,
    content: str,
    data: NotificationData,
) -> Notification:
    """Stage a notification in the current transaction, the caller commits.

    The type column is taken from the payload so the two can't disagree.
    """
    notification = Notification(
        user_id=user_id,
        type=NotificationType(data.type),
        title=title,
        content=content,
        data=data.model_dump(exclude={"type"}),
    )
    session.add(notification)
    return notification


def create_notification(
    session: Session,
    *,
    user_id: str,
    title: str,
    content: str,
    data: NotificationData,
) -> Notification:
    notification = add_notification(
        session, user_id=user_id, title=title, content=content, data=data
    )
    session.commit()
    publish(user_id)
    return notification


def publish(user_id: str):
    feed.publish(NOTIFICATIONS_TABLE, user_id)


def list_notifications(
    session: Session, *, user_id: str, limit: int | None = None
) -> Sequence[Notification]:
    return session.exec(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit or settings.NOTIFICATIONS_LIMIT)
    ).all()


def unread_count(session: Session, *, user_id: str) -> int:
    return session.exec(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
    ).one()


def _get_owned(session: Session, notification_id: int, user_id: str) -> Notification:
    notification = session.get(Notification, notification_id)
    # someone else's notification is reported as missing
    if not notification or notification.user_id != user_id:
        raise NotFound("Notification not found")
    return notification


def mark_read(session: Session, *, notification_id: int, user_id: str) -> Notification:
    notification = _get_owned(session, notification_id, user_id)
    if not notification.read:
        notification.read = True
        session.add(notification)
        session.commit()
        publish(user_id)
    return notification


def mark_all_read(session: Session, *, user_id: str) -> int:
    result = session.exec(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
        .values(read=True)
    )
    session.commit()
    if result.rowcount:
        publish(user_id)
    return result.rowcount


def delete_notification(session: Session, *, notification_id: int, user_id: str):
    notification = _get_owned(session, notification_id, user_id)
    session.delete(notification)
    session.commit()
    publish(user_id)


def delete_all(session: Session, *, user_id: str) -> int:
    result = session.exec(delete(Notification).where(Notification.user_id == user_id))
    session.commit()
    publish(user_id)
    return result.rowcount


def _mark_matching_read(session: Session, user_id: str, type_: NotificationType, match):
    """Mark read the unread notifications of a type whose payload matches.

    Doesn't commit, so it can join the caller's transaction.
    """
    unread = session.exec(
        select(Notification).where(
            Notification.user_id == user_id,
            Notification.type == type_,
            Notification.read == False,  # noqa: E712
        )
    ).all()
    marked = 0
    for notification in unread:
        if match(notification.payload):
            notification.read = True
            session.add(notification)
            marked += 1
    return marked


def mark_friend_request_read(session: Session, *, user_id: str, friendship_id: int) -> int:
    def match(payload: FriendRequestData):
        return payload.friendship_id == friendship_id

    return _mark_matching_read(session, user_id, NotificationType.friend_request, match)


def mark_messages_from_read(session: Session, *, user_id: str, sender_id: str) -> int:
    def match(payload: MessageData):
        return payload.sender_id == sender_id

    return _mark_matching_read(session, user_id, NotificationType.message, match)
