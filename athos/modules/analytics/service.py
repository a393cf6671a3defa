"""Buffered analytics event tracking.

Tracking never raises to the caller. Events are buffered and sent in
batches; a batch that fails is put back at the front of the buffer once,
and dropped if it fails again.
"""

import logging
from collections import deque
from typing import Any
from uuid import UUID

from athos.modules.analytics.interface import AnalyticsEvent, IEventSink
from athos.shared.models import AnalyticsEventType

logger = logging.getLogger(__name__)

MAX_DELIVERY_ATTEMPTS = 2


class AnalyticsService:
    """Collects learner events and forwards them to a sink."""

    def __init__(self, sink: IEventSink, batch_size: int = 10) -> None:
        self._sink = sink
        self._batch_size = max(1, batch_size)
        self._queue: deque[AnalyticsEvent] = deque()

    @property
    def sink(self) -> IEventSink:
        return self._sink

    @property
    def pending(self) -> int:
        """Number of buffered events not yet delivered."""
        return len(self._queue)

    async def track(
        self,
        user_id: UUID,
        event_type: AnalyticsEventType,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Record an event; sends a batch once the buffer is full.

        Args:
            user_id: Learner the event belongs to
            event_type: Kind of activity
            data: Event payload (module/section ids, scores, ...)
        """
        try:
            self._queue.append(AnalyticsEvent(user_id=user_id, event_type=event_type, data=data or {}))
            if len(self._queue) >= self._batch_size:
                await self.flush()
        except Exception as e:
            logger.warning(f"Failed to track {event_type.value} event: {e}")

    async def flush(self) -> int:
        """Send one batch from the front of the buffer.

        Returns:
            Number of events delivered
        """
        if not self._queue:
            return 0

        batch = [self._queue.popleft() for _ in range(min(self._batch_size, len(self._queue)))]
        try:
            await self._sink.send(batch)
        except Exception as e:
            for event in batch:
                event.attempts += 1
            retry = [event for event in batch if event.attempts < MAX_DELIVERY_ATTEMPTS]
            dropped = len(batch) - len(retry)
            self._queue.extendleft(reversed(retry))
            logger.warning(
                f"Analytics flush failed: {e}",
                extra={"requeued": len(retry), "dropped": dropped},
            )
            return 0

        logger.debug(f"Flushed {len(batch)} analytics events")
        return len(batch)

    async def flush_all(self) -> int:
        """Drain the buffer.

        Terminates because every batch is either delivered or dropped after
        its second failed attempt.
        """
        delivered = 0
        while self._queue:
            delivered += await self.flush()
        return delivered
