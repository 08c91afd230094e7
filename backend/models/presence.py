import datetime
from enum import Enum

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from models.types import UtcAwareDateTime


class PresenceStatus(str, Enum):
    online = "online"
    offline = "offline"
    away = "away"


class Presence(SQLModel, table=True):
    """Last heartbeat of a user, one row per user (upserted).

    The stored status is a raw label: readers must combine it with
    ``last_seen`` (see services.presence.is_online).
    """

    __tablename__ = "user_presence"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    status: PresenceStatus = Field(default=PresenceStatus.offline, index=True)
    last_seen: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False, index=True),
    )
