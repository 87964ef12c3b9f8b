# backend/modules/seating/__init__.py

from .enums.seating_enums import (
    ReservationStatus, WaitlistStatus, WaitlistAction,
    CapacityLevel, PartySizeBucket
)

from .schemas.seating_schemas import (
    ReservationSnapshot, TableSnapshot, TurnTimeStats, PartySizeTurnTime,
    TimelineBlock, TimelineRow, BlockPosition, CapacityRow,
    WaitlistEntry, WaitlistEntryCreate, WaitlistIntent, WaitlistSnapshot,
    WaitlistAnalytics
)

from .services.turn_time_service import TurnTimeModel
from .services.timeline_service import TimelineBuilder
from .services.capacity_service import CapacityAggregator, capacity_percent, capacity_level
from .services.waitlist_queue_service import WaitlistQueue
from .services.waitlist_analytics_service import WaitlistAnalyticsService

from .stores.waitlist_store import (
    WaitlistStore, InMemoryWaitlistStore, SQLAlchemyWaitlistStore
)

from .exceptions import (
    SeatingException, WaitlistConflictError, WaitlistEntryNotFoundError
)

__all__ = [
    # Enums
    "ReservationStatus", "WaitlistStatus", "WaitlistAction",
    "CapacityLevel", "PartySizeBucket",

    # Schemas
    "ReservationSnapshot", "TableSnapshot", "TurnTimeStats", "PartySizeTurnTime",
    "TimelineBlock", "TimelineRow", "BlockPosition", "CapacityRow",
    "WaitlistEntry", "WaitlistEntryCreate", "WaitlistIntent", "WaitlistSnapshot",
    "WaitlistAnalytics",

    # Services
    "TurnTimeModel", "TimelineBuilder", "CapacityAggregator",
    "capacity_percent", "capacity_level",
    "WaitlistQueue", "WaitlistAnalyticsService",

    # Stores
    "WaitlistStore", "InMemoryWaitlistStore", "SQLAlchemyWaitlistStore",

    # Exceptions
    "SeatingException", "WaitlistConflictError", "WaitlistEntryNotFoundError",
]
