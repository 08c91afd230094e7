import logging
from typing import Sequence

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from exceptions import (
    AlreadyExists,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from models.auth import User
from models.common import utcnow
from models.friendship import NO_FRIENDSHIP, Friendship, FriendshipStatus
from models.notifications import FriendAcceptedData, FriendRequestData
from services import notifications
from services.realtime import feed

logger = logging.getLogger("matchup.friendship")

FRIENDSHIPS_TABLE = Friendship.__tablename__


def _published(friendship: Friendship):
    feed.publish(FRIENDSHIPS_TABLE, friendship.requester_id)
    feed.publish(FRIENDSHIPS_TABLE, friendship.addressee_id)


def find_between(session: Session, a: str, b: str) -> Friendship | None:
    low, high = Friendship.canonical_pair(a, b)
    return session.exec(
        select(Friendship).where(
            Friendship.user_low_id == low,
            Friendship.user_high_id == high,
        )
    ).first()


def status_between(session: Session, *, user_id: str, other_id: str) -> dict:
    """Relationship as seen by user_id.

    is_requester tells "request sent" apart from "accept/decline".
    """
    friendship = find_between(session, user_id, other_id)
    if not friendship:
        return {"status": NO_FRIENDSHIP}
    return {
        "status": FriendshipStatus(friendship.status).value,
        "is_requester": friendship.requester_id == user_id,
        "friendship_id": friendship.id,
    }


def are_friends(session: Session, a: str, b: str) -> bool:
    friendship = find_between(session, a, b)
    return friendship is not None and friendship.status == FriendshipStatus.accepted


def send_request(session: Session, *, requester: User, addressee_id: str) -> Friendship:
    if requester.id == addressee_id:
        raise ValidationError("Cannot friend yourself.")
    if not session.get(User, addressee_id):
        raise NotFound("User not found")

    # any row for the pair blocks a new request, whatever its status or direction
    if find_between(session, requester.id, addressee_id):
        raise AlreadyExists("Friendship request already exists")

    low, high = Friendship.canonical_pair(requester.id, addressee_id)
    friendship = Friendship(
        requester_id=requester.id,
        addressee_id=addressee_id,
        user_low_id=low,
        user_high_id=high,
        status=FriendshipStatus.pending,
    )
    session.add(friendship)
    try:
        session.flush()
    except IntegrityError as e:
        # a concurrent request for the same pair won the race
        session.rollback()
        raise AlreadyExists("Friendship request already exists") from e

    notifications.add_notification(
        session,
        user_id=addressee_id,
        title="New friend request",
        content=f"{requester.full_name or requester.username} wants to be your friend",
        data=FriendRequestData(friendship_id=friendship.id, requester_id=requester.id),
    )
    session.commit()
    logger.debug(f"{requester.id} requested friendship with {addressee_id}")
    _published(friendship)
    notifications.publish(addressee_id)
    return friendship


def _get_friendship(session: Session, friendship_id: int) -> Friendship:
    friendship = session.get(Friendship, friendship_id)
    if not friendship:
        raise NotFound("Friendship not found")
    return friendship


def _respond(
    session: Session, *, friendship_id: int, user: User, target: FriendshipStatus
) -> Friendship:
    friendship = _get_friendship(session, friendship_id)
    if not friendship.involves(user.id):
        raise NotFound("Friendship not found")
    if friendship.addressee_id != user.id:
        raise PermissionDenied("Only the addressee can respond to a friend request.")

    if friendship.status == target:
        # second tap, or a second device: the row already says what we want
        logger.debug(f"Friendship {friendship.id} already {target.value}")
        return friendship
    if friendship.status != FriendshipStatus.pending:
        raise InvalidTransition(
            f"Cannot mark a {FriendshipStatus(friendship.status).value} request as {target.value}."
        )

    friendship.status = target
    friendship.updated_at = utcnow()
    session.add(friendship)
    notifications.mark_friend_request_read(
        session, user_id=user.id, friendship_id=friendship.id
    )
    if target == FriendshipStatus.accepted:
        notifications.add_notification(
            session,
            user_id=friendship.requester_id,
            title="Friend request accepted",
            content=f"{user.full_name or user.username} accepted your friend request",
            data=FriendAcceptedData(friendship_id=friendship.id, addressee_id=user.id),
        )
    session.commit()
    _published(friendship)
    notifications.publish(user.id)
    notifications.publish(friendship.requester_id)
    return friendship


def accept_request(session: Session, *, friendship_id: int, user: User) -> Friendship:
    return _respond(
        session,
        friendship_id=friendship_id,
        user=user,
        target=FriendshipStatus.accepted,
    )


def decline_request(session: Session, *, friendship_id: int, user: User) -> Friendship:
    return _respond(
        session,
        friendship_id=friendship_id,
        user=user,
        target=FriendshipStatus.declined,
    )


def remove_friend(session: Session, *, friendship_id: int, user_id: str) -> None:
    friendship = _get_friendship(session, friendship_id)
    if not friendship.involves(user_id):
        raise NotFound("Friendship not found")
    if friendship.status != FriendshipStatus.accepted:
        raise InvalidTransition("No existing friendship to remove.")
    participants = (friendship.requester_id, friendship.addressee_id)
    session.delete(friendship)
    session.commit()
    for participant in participants:
        feed.publish(FRIENDSHIPS_TABLE, participant)


def _accepted_of(user_id: str):
    return select(Friendship).where(
        Friendship.status == FriendshipStatus.accepted,
        or_(Friendship.requester_id == user_id, Friendship.addressee_id == user_id),
    )


def friend_ids(session: Session, *, user_id: str) -> list[str]:
    return [fr.other(user_id) for fr in session.exec(_accepted_of(user_id))]


def list_friends(session: Session, *, user_id: str) -> list[dict]:
    friendships = session.exec(_accepted_of(user_id)).all()
    users = {
        u.id: u
        for u in session.exec(
            select(User).where(User.id.in_([fr.other(user_id) for fr in friendships]))
        )
    }
    friends = []
    for fr in friendships:
        friend = users.get(fr.other(user_id))
        if not friend:
            continue
        friends.append(
            {
                **friend.public(),
                "friendship_id": fr.id,
                "friends_since": fr.created_at.isoformat(),
            }
        )
    return friends


def list_pending_requests(session: Session, *, user_id: str) -> Sequence[Friendship]:
    """Requests received by user_id, newest first"""
    return session.exec(
        select(Friendship)
        .where(
            Friendship.addressee_id == user_id,
            Friendship.status == FriendshipStatus.pending,
        )
        .order_by(Friendship.created_at.desc())
    ).all()


def list_sent_requests(session: Session, *, user_id: str) -> Sequence[Friendship]:
    return session.exec(
        select(Friendship)
        .where(
            Friendship.requester_id == user_id,
            Friendship.status == FriendshipStatus.pending,
        )
        .order_by(Friendship.created_at.desc())
    ).all()


def friendship_to_dict(friendship: Friendship) -> dict:
    return {
        "id": friendship.id,
        "requester_id": friendship.requester_id,
        "addressee_id": friendship.addressee_id,
        "status": FriendshipStatus(friendship.status).value,
        "created_at": friendship.created_at.isoformat(),
        "updated_at": friendship.updated_at.isoformat(),
    }
