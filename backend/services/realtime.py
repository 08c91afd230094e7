# in-process fan-out of "row changed" signals
import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger("matchup.realtime")


@dataclass(frozen=True)
class Change:
    """Something changed in `table` for the row keyed by `key`.

    Carries no data: receivers re-fetch what they need.
    """

    table: str
    key: str

    def to_dict(self) -> dict:
        return {"table": self.table, "key": self.key, "event": "changed"}


class Subscription:
    def __init__(
        self,
        feed: "ChangeFeed",
        filters: dict[str, frozenset[str] | None],
        max_pending: int,
    ):
        self.feed = feed
        # table -> watched keys, None watches every key of the table
        self.filters = filters
        self.queue: asyncio.Queue[Change] = asyncio.Queue(maxsize=max_pending)
        self.loop = asyncio.get_running_loop()
        self.closed = False

    def matches(self, change: Change) -> bool:
        if change.table not in self.filters:
            return False
        keys = self.filters[change.table]
        return keys is None or change.key in keys

    def _deliver(self, change: Change):
        try:
            self.queue.put_nowait(change)
        except asyncio.QueueFull:
            # the pending signals already tell the subscriber to re-poll
            logger.debug(f"Dropping change signal for {change} - queue full")

    async def get(self) -> Change:
        return await self.queue.get()

    def __aiter__(self):
        return self

    async def __anext__(self) -> Change:
        if self.closed:
            raise StopAsyncIteration
        return await self.get()

    def close(self):
        self.closed = True
        self.feed.unsubscribe(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.close()


class ChangeFeed:
    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self.subscriptions: set[Subscription] = set()

    def subscribe(self, table: str, keys: Iterable[str] | None = None) -> Subscription:
        """Subscribe to changes on a table, optionally only for some row keys.

        Must be called from a running event loop.
        """
        return self.subscribe_many({table: keys})

    def subscribe_many(
        self, filters: dict[str, Iterable[str] | None]
    ) -> Subscription:
        subscription = Subscription(
            self,
            {
                table: frozenset(keys) if keys is not None else None
                for table, keys in filters.items()
            },
            self.max_pending,
        )
        self.subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        self.subscriptions.discard(subscription)

    def publish(self, table: str, key: str) -> int:
        """Signal the subscribers of table/key, from any thread.

        Returns the number of subscriptions notified.
        """
        change = Change(table=table, key=key)
        notified = 0
        for subscription in list(self.subscriptions):
            if not subscription.matches(change):
                continue
            if subscription.loop.is_closed():
                self.unsubscribe(subscription)
                continue
            subscription.loop.call_soon_threadsafe(subscription._deliver, change)
            notified += 1
        return notified

    def clear(self):
        self.subscriptions.clear()


feed = ChangeFeed()
