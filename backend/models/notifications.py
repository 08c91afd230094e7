import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, TypeAdapter
from sqlalchemy import Column
from sqlmodel import SQLModel, Field, JSON

from models.types import UtcAwareDateTime


class NotificationType(str, Enum):
    friend_request = "friend_request"
    friend_accepted = "friend_accepted"
    message = "message"
    new_user_match = "new_user_match"
    game_update = "game_update"


# The shape of Notification.data depends on Notification.type
class FriendRequestData(BaseModel):
    type: Literal["friend_request"] = "friend_request"
    friendship_id: int
    requester_id: str


class FriendAcceptedData(BaseModel):
    type: Literal["friend_accepted"] = "friend_accepted"
    friendship_id: int
    addressee_id: str


class MessageData(BaseModel):
    type: Literal["message"] = "message"
    sender_id: str
    message_id: int | None = None


class NewUserMatchData(BaseModel):
    type: Literal["new_user_match"] = "new_user_match"
    user_id: str
    sport: str | None = None


class GameUpdateData(BaseModel):
    type: Literal["game_update"] = "game_update"
    game_id: str
    sport: str | None = None


NotificationData = Annotated[
    Union[
        FriendRequestData,
        FriendAcceptedData,
        MessageData,
        NewUserMatchData,
        GameUpdateData,
    ],
    Discriminator("type"),
]
notification_data_adapter: TypeAdapter[NotificationData] = TypeAdapter(NotificationData)


def parse_notification_data(type_: str, data: dict[str, Any] | None):
    return notification_data_adapter.validate_python({**(data or {}), "type": type_})


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    type: NotificationType = Field(index=True)
    title: str
    content: str
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    read: bool = Field(default=False, index=True)
    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False, index=True),
    )

    @property
    def payload(self) -> NotificationData:
        return parse_notification_data(NotificationType(self.type).value, self.data)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": NotificationType(self.type).value,
            "title": self.title,
            "content": self.content,
            "data": self.data,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
        }
