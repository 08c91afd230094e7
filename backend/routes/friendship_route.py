from fastapi import APIRouter, Depends
from sqlmodel import Session

from exceptions import NotFound
from models.auth import User, get_user_by_identifier
from models.common import get_session
from routes.deps import current_user
from services import friendship as friendships
from services.cache import cache

router = APIRouter(prefix="/friendship", tags=["friendship"])


def _target(session: Session, identifier: str) -> User:
    target = get_user_by_identifier(session, identifier)
    if not target:
        raise NotFound("User not found")
    return target


def _with_users(session: Session, rows, user_key: str) -> list[dict]:
    profiles = cache.get_users({getattr(fr, user_key) for fr in rows}, session)
    return [
        {
            **friendships.friendship_to_dict(fr),
            "user": profiles.get(getattr(fr, user_key)),
        }
        for fr in rows
    ]


@router.get("/status/{identifier}")
async def friendship_status(
    identifier: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    """Relationship between the current user and the target user.

    The status is one of: self, none, pending, accepted, declined, blocked.
    """
    target = _target(session, identifier)
    if user.id == target.id:
        return {"status": "self"}
    return friendships.status_between(session, user_id=user.id, other_id=target.id)


@router.post("/request/{identifier}")
async def send_friend_request(
    identifier: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    target = _target(session, identifier)
    fr = friendships.send_request(session, requester=user, addressee_id=target.id)
    return {"friendship": friendships.friendship_to_dict(fr)}


@router.post("/accept/{friendship_id}")
async def accept_request(
    friendship_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    fr = friendships.accept_request(session, friendship_id=friendship_id, user=user)
    return {"friendship": friendships.friendship_to_dict(fr)}


@router.post("/decline/{friendship_id}")
async def decline_request(
    friendship_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    fr = friendships.decline_request(session, friendship_id=friendship_id, user=user)
    return {"friendship": friendships.friendship_to_dict(fr)}


@router.delete("/{friendship_id}")
async def remove_friend(
    friendship_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    friendships.remove_friend(session, friendship_id=friendship_id, user_id=user.id)
    return {"message": "Friend removed"}


@router.get("/pending")
async def pending_requests(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = friendships.list_pending_requests(session, user_id=user.id)
    return {"pending": _with_users(session, rows, "requester_id")}


@router.get("/sent")
async def sent_requests(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = friendships.list_sent_requests(session, user_id=user.id)
    return {"sent": _with_users(session, rows, "addressee_id")}


@router.get("/list")
async def list_friends(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"friends": friendships.list_friends(session, user_id=user.id)}
