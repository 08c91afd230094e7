from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from models.auth import User
from models.common import get_session
from routes.deps import current_user
from services import friendship as friendships
from services import presence, users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search")
async def search(
    q: str = Query(..., min_length=1),
    limit: int | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = users.search_users(session, query=q, user_id=user.id, limit=limit)
    return {"users": [u.public() for u in rows]}


@router.get("/{user_id}")
async def profile(
    user_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    """Another player's profile, with the relationship and presence next to it"""
    target = users.get_profile(session, user_id=user_id)
    if target.id == user.id:
        relationship = {"status": "self"}
    else:
        relationship = friendships.status_between(
            session, user_id=user.id, other_id=target.id
        )
    return {
        "user": users.profile_to_dict(target),
        "friendship": relationship,
        "presence": presence.get_user_presence(session, user_id=target.id),
    }
