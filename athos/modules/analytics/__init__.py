"""Analytics Module - Fire-and-forget learner activity events."""

from athos.modules.analytics.interface import AnalyticsEvent, IEventSink
from athos.modules.analytics.service import AnalyticsService
from athos.modules.analytics.sinks import InMemoryEventSink, RedisEventSink

__all__ = [
    # Interface types
    "AnalyticsEvent",
    "IEventSink",
    # Implementations
    "AnalyticsService",
    "InMemoryEventSink",
    "RedisEventSink",
]
