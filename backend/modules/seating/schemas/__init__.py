# backend/modules/seating/schemas/__init__.py

from .seating_schemas import (
    ReservationSnapshot,
    TableSnapshot,
    PartySizeTurnTime,
    LabeledTurnTime,
    TurnTimeStats,
    TimelineBlock,
    TimelineRow,
    BlockPosition,
    CapacityRow,
    WaitlistEntryCreate,
    WaitlistEntry,
    WaitlistIntent,
    WaitlistSnapshot,
    HourlyWaitStat,
    DailyWaitStat,
    WaitlistAnalytics,
)

__all__ = [
    "ReservationSnapshot",
    "TableSnapshot",
    "PartySizeTurnTime",
    "LabeledTurnTime",
    "TurnTimeStats",
    "TimelineBlock",
    "TimelineRow",
    "BlockPosition",
    "CapacityRow",
    "WaitlistEntryCreate",
    "WaitlistEntry",
    "WaitlistIntent",
    "WaitlistSnapshot",
    "HourlyWaitStat",
    "DailyWaitStat",
    "WaitlistAnalytics",
]
