import logging
from contextlib import asynccontextmanager

from exceptions import RemoteError

logger = logging.getLogger("matchup.client.projections")


class NotificationsProjection:
    """Local copy of the notification list, updated optimistically.

    Each change is applied locally first, then sent to the server. When the
    server refuses, the local copy goes back to the last agreed snapshot and
    the RemoteError reaches the caller.
    """

    def __init__(self, client):
        self.client = client
        self.items: list[dict] = []

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.items if not n["read"])

    async def refresh(self) -> list[dict]:
        self.items = await self.client.notifications()
        return self.items

    @asynccontextmanager
    async def _optimistic(self):
        snapshot = [dict(n) for n in self.items]
        try:
            yield
        except RemoteError:
            logger.warning("Server rejected a notifications update, rolling back")
            self.items = snapshot
            raise

    def _find(self, notification_id: int) -> dict | None:
        return next((n for n in self.items if n["id"] == notification_id), None)

    async def mark_read(self, notification_id: int):
        async with self._optimistic():
            notification = self._find(notification_id)
            if notification is not None:
                notification["read"] = True
            await self.client.mark_notification_read(notification_id)

    async def mark_all_read(self):
        async with self._optimistic():
            for notification in self.items:
                notification["read"] = True
            await self.client.mark_all_notifications_read()

    async def delete(self, notification_id: int):
        async with self._optimistic():
            self.items = [n for n in self.items if n["id"] != notification_id]
            await self.client.delete_notification(notification_id)

    async def delete_all(self):
        async with self._optimistic():
            self.items = []
            await self.client.delete_all_notifications()
