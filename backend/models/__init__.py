"""Models package for the Matchup backend"""

from .common import get_session, CamelModel
from .types import UtcAwareDateTime
from .auth import User
from .friendship import Friendship, FriendshipStatus
from .presence import Presence, PresenceStatus
from .messages import Message
from .notifications import Notification, NotificationType
from .stats import Achievement, GameHistory, GameResult, Sport, UserStatistics

__all__ = [
    "Achievement",
    "CamelModel",
    "Friendship",
    "FriendshipStatus",
    "GameHistory",
    "GameResult",
    "Message",
    "Notification",
    "NotificationType",
    "Presence",
    "PresenceStatus",
    "Sport",
    "User",
    "UserStatistics",
    "UtcAwareDateTime",
    "get_session",
]
