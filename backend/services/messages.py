import logging
from typing import Sequence

from sqlalchemy import and_, or_
from sqlmodel import Session, func, select, update

from exceptions import NotFound, ValidationError
from models.auth import User
from models.messages import Message
from models.notifications import MessageData
from services import notifications
from services.cache import cache
from services.friendship import friend_ids
from services.realtime import feed

logger = logging.getLogger("matchup.messages")

MESSAGES_TABLE = Message.__tablename__
MESSAGE_PREVIEW_LENGTH = 80


def _between(a: str, b: str):
    return or_(
        and_(Message.sender_id == a, Message.receiver_id == b),
        and_(Message.sender_id == b, Message.receiver_id == a),
    )


def send_message(
    session: Session, *, sender: User, receiver_id: str, content: str
) -> Message:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Message cannot be empty")
    if receiver_id == sender.id:
        raise ValidationError("Cannot message yourself")
    if not session.get(User, receiver_id):
        raise NotFound("User not found")

    message = Message(sender_id=sender.id, receiver_id=receiver_id, content=content)
    session.add(message)
    session.flush()
    notifications.add_notification(
        session,
        user_id=receiver_id,
        title=f"New message from {sender.full_name or sender.username}",
        content=content[:MESSAGE_PREVIEW_LENGTH],
        data=MessageData(sender_id=sender.id, message_id=message.id),
    )
    session.commit()
    feed.publish(MESSAGES_TABLE, receiver_id)
    notifications.publish(receiver_id)
    return message


def get_conversation(session: Session, *, user_id: str, partner_id: str) -> Sequence[Message]:
    """All messages between the two users, oldest first"""
    return session.exec(
        select(Message)
        .where(_between(user_id, partner_id))
        .order_by(Message.created_at.asc(), Message.id.asc())
    ).all()


def conversation_unread_count(session: Session, *, user_id: str, partner_id: str) -> int:
    return session.exec(
        select(func.count())
        .select_from(Message)
        .where(
            Message.receiver_id == user_id,
            Message.sender_id == partner_id,
            Message.read == False,  # noqa: E712
        )
    ).one()


def unread_count(session: Session, *, user_id: str) -> int:
    """Unread messages over all conversations, counted fresh on every call"""
    return session.exec(
        select(func.count())
        .select_from(Message)
        .where(Message.receiver_id == user_id, Message.read == False)  # noqa: E712
    ).one()


def mark_conversation_read(session: Session, *, user_id: str, partner_id: str) -> int:
    """Flip every unread message from partner to user in a single UPDATE.

    The message notifications from that partner are marked read with it.
    """
    result = session.exec(
        update(Message)
        .where(
            Message.sender_id == partner_id,
            Message.receiver_id == user_id,
            Message.read == False,  # noqa: E712
        )
        .values(read=True)
    )
    notified = notifications.mark_messages_from_read(
        session, user_id=user_id, sender_id=partner_id
    )
    session.commit()
    if result.rowcount:
        feed.publish(MESSAGES_TABLE, user_id)
    if notified:
        notifications.publish(user_id)
    return result.rowcount


def list_conversations(session: Session, *, user_id: str) -> list[dict]:
    """One entry per counterpart, most recent conversation first.

    Derived on every call from the messages and friendships tables.
    """
    messages = session.exec(
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    ).all()

    conversations: dict[str, dict] = {}
    for message in messages:
        partner_id = message.partner_of(user_id)
        conversation = conversations.get(partner_id)
        if conversation is None:
            conversation = conversations[partner_id] = {
                "partner_id": partner_id,
                "last_message": message_to_dict(message),
                "unread_count": 0,
                "is_friend": False,
            }
        if message.receiver_id == user_id and not message.read:
            conversation["unread_count"] += 1

    if not conversations:
        return []

    friends = set(friend_ids(session, user_id=user_id))
    profiles = cache.get_users(list(conversations), session)
    for partner_id, conversation in conversations.items():
        conversation["is_friend"] = partner_id in friends
        conversation["user"] = profiles.get(partner_id)
    return list(conversations.values())


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.content,
        "read": message.read,
        "created_at": message.created_at.isoformat(),
    }
