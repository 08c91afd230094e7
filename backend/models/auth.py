"""User and profile models"""

import datetime
import uuid

from sqlalchemy import func
from sqlmodel import SQLModel, Field, Column, JSON, Session, select
from .common import CamelModel
from .types import UtcAwareDateTime

USERNAME_MAX_LENGTH = 40


def new_id() -> str:
    return uuid.uuid4().hex


class User(SQLModel, CamelModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(unique=True, index=True)
    username: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    password_hash: str = ""
    avatar_url: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    positions: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    updated_at: datetime.datetime | None = Field(
        default=None,
        sa_column=Column(UtcAwareDateTime(), onupdate=func.now(), nullable=True),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def public(self) -> dict:
        """The profile fields other users are allowed to see"""
        return {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "avatar_url": self.avatar_url,
        }

    def __str__(self):
        return self.username


def get_user_by_identifier(session: Session, ident: str) -> User | None:
    # ids first, a username can look like somebody else's id
    user = session.get(User, ident)
    if user:
        return user
    return session.exec(select(User).where(User.username == ident)).first()
