"""Analytics Module - Fire-and-forget learner activity events."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID, uuid4

from athos.shared.datetime_utils import datetime_to_iso, utc_now
from athos.shared.models import AnalyticsEventType


@dataclass
class AnalyticsEvent:
    """One learner activity event."""

    user_id: UUID
    event_type: AnalyticsEventType
    data: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=utc_now)
    attempts: int = 0  # delivery attempts, not serialized

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "event_type": self.event_type.value,
            "data": self.data,
            "timestamp": datetime_to_iso(self.timestamp),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class IEventSink(Protocol):
    """Destination for batches of analytics events."""

    async def send(self, events: list[AnalyticsEvent]) -> None:
        """Deliver a batch. Raises on failure so the caller can retry."""
        ...
