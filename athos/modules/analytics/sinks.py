"""Analytics event sinks."""

import logging

from athos.modules.analytics.interface import AnalyticsEvent
from athos.shared.database import get_redis

logger = logging.getLogger(__name__)


class InMemoryEventSink:
    """Keeps delivered events in a list. Used in development and tests."""

    def __init__(self) -> None:
        self.events: list[AnalyticsEvent] = []

    async def send(self, events: list[AnalyticsEvent]) -> None:
        self.events.extend(events)


class RedisEventSink:
    """Appends events as JSON to a Redis list for an external consumer."""

    def __init__(self, queue_key: str) -> None:
        self._queue_key = queue_key

    async def send(self, events: list[AnalyticsEvent]) -> None:
        if not events:
            return
        redis_client = await get_redis()
        await redis_client.rpush(self._queue_key, *(event.to_json() for event in events))
        logger.debug(f"Pushed {len(events)} analytics events to {self._queue_key}")
