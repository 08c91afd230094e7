"""Chat screen aggregation: the friends and requests tabs, and the badges"""

from sqlmodel import Session

from services import messages, notifications
from services.friendship import list_pending_requests


def inbox(session: Session, *, user_id: str) -> dict:
    conversations = messages.list_conversations(session, user_id=user_id)
    friends = [c for c in conversations if c["is_friend"]]
    requests = [c for c in conversations if not c["is_friend"]]
    pending = list_pending_requests(session, user_id=user_id)

    return {
        "friends": {
            "conversations": friends,
            "count": len(friends),
            "unread": sum(c["unread_count"] for c in friends),
        },
        "requests": {
            "conversations": requests,
            "pending_requests": len(pending),
            "count": len(requests) + len(pending),
            # a pending friend request counts as one unread item
            "unread": len(pending) + sum(c["unread_count"] for c in requests),
        },
    }


def badges(session: Session, *, user_id: str) -> dict:
    """The two independent counters, recounted on every call"""
    return {
        "messages": messages.unread_count(session, user_id=user_id),
        "notifications": notifications.unread_count(session, user_id=user_id),
    }
