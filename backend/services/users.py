"""Finding other players and reading their profiles"""

import logging
from typing import Sequence

from sqlalchemy import func, or_
from sqlmodel import Session, select

import settings
from exceptions import NotFound, ValidationError
from models.auth import User

logger = logging.getLogger("matchup.users")


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_users(
    session: Session, *, query: str, user_id: str | None = None, limit: int | None = None
) -> Sequence[User]:
    """Case-insensitive substring match on username, first and last name"""
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query cannot be empty")
    pattern = f"%{_escape_like(query.lower())}%"
    statement = (
        select(User)
        .where(
            or_(
                func.lower(User.username).like(pattern, escape="\\"),
                func.lower(User.first_name).like(pattern, escape="\\"),
                func.lower(User.last_name).like(pattern, escape="\\"),
            )
        )
        .order_by(User.username)
        .limit(limit or settings.SEARCH_LIMIT)
    )
    if user_id:
        statement = statement.where(User.id != user_id)
    return session.exec(statement).all()


def get_profile(session: Session, *, user_id: str) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def profile_to_dict(user: User) -> dict:
    """What other players see, the email stays private"""
    return {
        **user.public(),
        "location": user.location,
        "bio": user.bio,
        "skills": user.skills or [],
        "positions": user.positions or [],
        "created_at": user.created_at.isoformat(),
    }
