# backend/modules/seating/enums/__init__.py

from .seating_enums import (
    ReservationStatus,
    WaitlistStatus,
    WaitlistAction,
    CapacityLevel,
    PartySizeBucket,
    WAITLIST_TRANSITIONS,
)

__all__ = [
    "ReservationStatus",
    "WaitlistStatus",
    "WaitlistAction",
    "CapacityLevel",
    "PartySizeBucket",
    "WAITLIST_TRANSITIONS",
]
