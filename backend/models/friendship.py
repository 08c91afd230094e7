import datetime
from enum import Enum

from sqlalchemy import UniqueConstraint, CheckConstraint, Column
from sqlmodel import SQLModel, Field

from models.types import UtcAwareDateTime


class FriendshipStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    blocked = "blocked"


# "none" is never stored, it is the absence of a row
NO_FRIENDSHIP = "none"


class Friendship(SQLModel, table=True):
    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friend_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_friend_order"),
    )

    id: int | None = Field(default=None, primary_key=True)

    # Direction of the request
    requester_id: str = Field(foreign_key="users.id", index=True)
    addressee_id: str = Field(foreign_key="users.id", index=True)

    # Canonical pair (always low < high), one row per unordered pair
    user_low_id: str = Field(foreign_key="users.id", index=True)
    user_high_id: str = Field(foreign_key="users.id", index=True)

    status: FriendshipStatus = Field(default=FriendshipStatus.pending, index=True)

    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )

    # Helpers
    @staticmethod
    def canonical_pair(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a < b else (b, a)

    def other(self, user_id: str) -> str:
        return self.addressee_id if user_id == self.requester_id else self.requester_id

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.addressee_id)
