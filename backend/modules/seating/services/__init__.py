from .turn_time_service import TurnTimeModel
from .timeline_service import TimelineBuilder
from .capacity_service import (
    CapacityAggregator,
    capacity_percent,
    capacity_level,
)
from .waitlist_queue_service import WaitlistQueue
from .waitlist_analytics_service import WaitlistAnalyticsService

__all__ = [
    "TurnTimeModel",
    "TimelineBuilder",
    "CapacityAggregator",
    "capacity_percent",
    "capacity_level",
    "WaitlistQueue",
    "WaitlistAnalyticsService",
]
