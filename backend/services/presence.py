"""Presence: liveness derived from heartbeats plus a freshness window.

A presence row stores the last label a client wrote and when. The label is
never trusted alone: a row claiming ``online`` whose ``last_seen`` is older
than the window reads as offline, whether or not the client ever wrote
``offline``.
"""

import datetime
import logging
from typing import Iterable, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

import settings
from models.common import utcnow
from models.presence import Presence, PresenceStatus
from models.types import as_utc
from services.friendship import friend_ids
from services.realtime import feed

logger = logging.getLogger("matchup.presence")

PRESENCE_TABLE = Presence.__tablename__


def presence_window() -> datetime.timedelta:
    return datetime.timedelta(seconds=settings.PRESENCE_WINDOW_SECONDS)


def is_online(presence: Presence | None, now: datetime.datetime | None = None) -> bool:
    if presence is None:
        return False
    now = now or utcnow()
    return (
        presence.status == PresenceStatus.online
        and now - as_utc(presence.last_seen) < presence_window()
    )


def effective_status(
    presence: Presence | None, now: datetime.datetime | None = None
) -> PresenceStatus:
    """The status a reader should show: stale rows are offline."""
    if presence is None:
        return PresenceStatus.offline
    now = now or utcnow()
    if now - as_utc(presence.last_seen) >= presence_window():
        return PresenceStatus.offline
    return PresenceStatus(presence.status)


def _fresh_online(now: datetime.datetime):
    # same rule as is_online, as SQL
    return (
        Presence.status == PresenceStatus.online,
        Presence.last_seen > now - presence_window(),
    )


def mark_presence(
    session: Session,
    *,
    user_id: str,
    status: PresenceStatus,
    now: datetime.datetime | None = None,
) -> Presence:
    """Upsert the caller's presence row, last write wins."""
    now = now or utcnow()
    presence = session.get(Presence, user_id)
    if presence is None:
        presence = Presence(user_id=user_id)
    presence.status = PresenceStatus(status)
    presence.last_seen = now
    session.add(presence)
    session.commit()
    logger.debug(f"Presence of {user_id}: {presence.status.value}")
    feed.publish(PRESENCE_TABLE, user_id)
    return presence


def list_online_friends(
    session: Session, *, user_id: str, now: datetime.datetime | None = None
) -> Sequence[Presence]:
    ids = friend_ids(session, user_id=user_id)
    if not ids:
        return []
    now = now or utcnow()
    return session.exec(
        select(Presence).where(Presence.user_id.in_(ids), *_fresh_online(now))
    ).all()


def list_all_online_users(
    session: Session, now: datetime.datetime | None = None
) -> Sequence[Presence]:
    now = now or utcnow()
    return session.exec(select(Presence).where(*_fresh_online(now))).all()


def count_online_users(session: Session, now: datetime.datetime | None = None) -> int:
    now = now or utcnow()
    return session.exec(
        select(func.count()).select_from(Presence).where(*_fresh_online(now))
    ).one()


def get_user_presence(
    session: Session, *, user_id: str, now: datetime.datetime | None = None
) -> dict:
    return describe(session.get(Presence, user_id), user_id=user_id, now=now)


def get_presence_for_users(
    session: Session, *, user_ids: Iterable[str], now: datetime.datetime | None = None
) -> list[dict]:
    user_ids = list(dict.fromkeys(user_ids))
    if not user_ids:
        return []
    rows = {
        p.user_id: p
        for p in session.exec(select(Presence).where(Presence.user_id.in_(user_ids)))
    }
    return [describe(rows.get(uid), user_id=uid, now=now) for uid in user_ids]


def describe(
    presence: Presence | None, *, user_id: str, now: datetime.datetime | None = None
) -> dict:
    """Presence as readers see it, with the freshness rule applied"""
    now = now or utcnow()
    return {
        "user_id": user_id,
        "status": effective_status(presence, now).value,
        "online": is_online(presence, now),
        "last_seen": as_utc(presence.last_seen).isoformat() if presence else None,
    }
