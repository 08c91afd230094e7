import logging
from pathlib import Path

from exceptions import RemoteError
from models.presence import PresenceStatus

from client.api import MatchupClient
from client.heartbeat import PresenceHeartbeat
from client.preferences import PreferenceStore
from client.projections import NotificationsProjection
from client.state import AppState

logger = logging.getLogger("matchup.client.session")


async def _load_list(name: str, loader) -> list:
    """Failed list loads degrade to an empty list, the screen stays usable"""
    try:
        return await loader()
    except RemoteError as e:
        logger.error(f"Error loading {name}: {e.detail}")
        return []


async def load_conversations(client: MatchupClient) -> list[dict]:
    return await _load_list("conversations", client.conversations)


async def load_friends(client: MatchupClient) -> list[dict]:
    return await _load_list("friends", client.friends)


async def load_online_friends(client: MatchupClient) -> list[dict]:
    return await _load_list("online friends", client.online_friends)


async def load_notifications(client: MatchupClient) -> list[dict]:
    return await _load_list("notifications", client.notifications)


async def load_search_results(client: MatchupClient, query: str) -> list[dict]:
    return await _load_list("search results", lambda: client.search_users(query))


class ClientSession:
    """Everything that lives between sign-in and sign-out.

    Built by sign_in, which starts the heartbeat; close() marks the user
    offline and stops it. The app state and the preferences belong to the
    session, a new account gets fresh ones.
    """

    def __init__(
        self,
        client: MatchupClient,
        user: dict,
        *,
        heartbeat_interval: float | None = None,
        preferences_dir: Path | None = None,
    ):
        self.client = client
        self.user = user
        self.heartbeat = PresenceHeartbeat(client, interval=heartbeat_interval)
        self.preferences = PreferenceStore(user["id"], directory=preferences_dir)
        self.state = AppState()
        self.state.select_sport(self.preferences.selected_sport)
        self.notifications = NotificationsProjection(client)

    @classmethod
    async def sign_in(cls, client: MatchupClient, email: str, password: str, **kwargs):
        user = await client.sign_in(email, password)
        session = cls(client, user, **kwargs)
        session.heartbeat.start()
        logger.info(f"Signed in as {user['username']}")
        return session

    @property
    def needs_questionnaire(self) -> bool:
        return not self.preferences.questionnaire_completed

    def select_sport(self, sport: str):
        self.state.select_sport(sport)
        self.preferences.set("selected_sport", self.state.selected_sport.value)

    async def complete_questionnaire(self, sport: str, answers: dict) -> dict:
        statistics = await self.client.save_questionnaire(sport, answers)
        self.preferences.set("questionnaire_completed", True)
        self.select_sport(sport)
        return statistics

    async def background(self):
        await self.heartbeat.background()

    async def foreground(self):
        await self.heartbeat.foreground()

    async def close(self):
        """Sign out: stop the heartbeat, then leave as offline"""
        await self.heartbeat.stop()
        try:
            await self.client.heartbeat(PresenceStatus.offline.value)
            await self.client.sign_out()
        except RemoteError as e:
            # the freshness window takes the user offline anyway
            logger.warning(f"Sign-out did not reach the server: {e.detail}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()
