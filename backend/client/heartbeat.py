import asyncio
import logging

import settings
from exceptions import RemoteError
from models.presence import PresenceStatus
from utils.logs import ratelimited_log

logger = logging.getLogger("matchup.client.heartbeat")


class PresenceHeartbeat:
    """Keep the user's presence fresh while the client runs.

    Every beat writes the current status, `away` while the app is in the
    background. A failed beat is logged and dropped, the next one retries
    on schedule and the server side freshness window covers the gap.
    """

    def __init__(self, client, interval: float | None = None):
        self.client = client
        self.interval = interval or settings.HEARTBEAT_INTERVAL_SECONDS
        self.status = PresenceStatus.online
        self.task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    async def beat(self) -> bool:
        try:
            await self.client.heartbeat(self.status.value)
        except RemoteError as e:
            ratelimited_log(logger.warning, f"Presence heartbeat failed: {e.detail}")
            return False
        return True

    async def _run(self):
        while True:
            await self.beat()
            await asyncio.sleep(self.interval)

    def start(self):
        if not self.running:
            self.task = asyncio.create_task(self._run(), name="presence-heartbeat")

    async def stop(self):
        if self.task is None:
            return
        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        self.task = None

    async def set_status(self, status: PresenceStatus):
        """Switch status and write it right away, without waiting for the next beat"""
        self.status = PresenceStatus(status)
        await self.beat()

    async def background(self):
        await self.set_status(PresenceStatus.away)

    async def foreground(self):
        await self.set_status(PresenceStatus.online)
