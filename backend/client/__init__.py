"""Python client of the Matchup API"""

from client.api import MatchupClient
from client.heartbeat import PresenceHeartbeat
from client.preferences import PreferenceStore
from client.projections import NotificationsProjection
from client.session import (
    ClientSession,
    load_conversations,
    load_friends,
    load_notifications,
    load_online_friends,
    load_search_results,
)
from client.state import AppState, FloatingButton

__all__ = [
    "AppState",
    "ClientSession",
    "FloatingButton",
    "MatchupClient",
    "NotificationsProjection",
    "PreferenceStore",
    "PresenceHeartbeat",
    "load_conversations",
    "load_friends",
    "load_notifications",
    "load_online_friends",
    "load_search_results",
]
