import datetime

from sqlalchemy import Column, Index
from sqlmodel import SQLModel, Field

from models.types import UtcAwareDateTime


class Message(SQLModel, table=True):
    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_receiver_unread", "receiver_id", "sender_id", "read"),
    )

    id: int | None = Field(default=None, primary_key=True)
    sender_id: str = Field(foreign_key="users.id", index=True)
    receiver_id: str = Field(foreign_key="users.id", index=True)
    content: str
    read: bool = False
    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False, index=True),
    )

    def partner_of(self, user_id: str) -> str:
        return self.receiver_id if self.sender_id == user_id else self.sender_id
