import datetime
from enum import Enum

from sqlalchemy import Column, UniqueConstraint, func
from sqlmodel import SQLModel, Field, JSON

from models.types import UtcAwareDateTime

DEFAULT_RATING = 2.0


class Sport(str, Enum):
    football = "football"
    padel = "padel"
    basketball = "basketball"


class GameResult(str, Enum):
    win = "win"
    loss = "loss"
    draw = "draw"


class UserStatistics(SQLModel, table=True):
    __tablename__ = "user_statistics"
    __table_args__ = (UniqueConstraint("user_id", "sport", name="uq_stats_user_sport"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    sport: Sport = Field(index=True)
    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    goals_scored: int = 0
    assists: int = 0
    average_rating: float = DEFAULT_RATING
    questionnaire: dict | None = Field(default=None, sa_column=Column(JSON))

    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    updated_at: datetime.datetime | None = Field(
        default=None,
        sa_column=Column(UtcAwareDateTime(), onupdate=func.now(), nullable=True),
    )


class GameHistory(SQLModel, table=True):
    __tablename__ = "game_history"

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    game_id: str
    sport: Sport = Field(index=True)
    result: GameResult
    goals_scored: int = 0
    assists: int = 0
    rating: float | None = None
    notes: str | None = None
    played_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False, index=True),
    )


class Achievement(SQLModel, table=True):
    """A badge unlocked by a user, sport-wide when sport is None"""

    __tablename__ = "user_achievements"

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    achievement_type: str
    name: str
    description: str
    sport: Sport | None = None
    data: dict = Field(default_factory=dict, sa_column=Column(JSON))
    unlocked_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False, index=True),
    )
