from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from models.auth import User
from models.common import get_session
from models.presence import PresenceStatus
from routes.deps import current_user
from services import presence

router = APIRouter(prefix="/presence", tags=["presence"])


class Heartbeat(BaseModel):
    status: PresenceStatus = PresenceStatus.online


@router.post("/heartbeat")
async def heartbeat(
    payload: Heartbeat | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    status = payload.status if payload else PresenceStatus.online
    record = presence.mark_presence(session, user_id=user.id, status=status)
    return presence.describe(record, user_id=user.id)


@router.get("/friends")
async def online_friends(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = presence.list_online_friends(session, user_id=user.id)
    return {"online": [presence.describe(p, user_id=p.user_id) for p in rows]}


@router.get("/count")
async def online_count(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"online": presence.count_online_users(session)}


@router.get("/users")
async def users_presence(
    ids: list[str] = Query(default=[]),
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"presence": presence.get_presence_for_users(session, user_ids=ids)}


@router.get("/user/{user_id}")
async def user_presence(
    user_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return presence.get_user_presence(session, user_id=user_id)
