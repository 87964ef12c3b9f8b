# backend/modules/seating/enums/seating_enums.py

from enum import Enum
from typing import Optional


class ReservationStatus(str, Enum):
    """Reservation status as reported by the booking backend"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"

    @property
    def occupies_table(self) -> bool:
        """Cancelled and no-show reservations never take up a table"""
        return self not in (ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW)


class WaitlistStatus(str, Enum):
    """Waitlist entry lifecycle"""

    WAITING = "waiting"
    NOTIFIED = "notified"  # Guest has been told their table is ready
    SEATED = "seated"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"

    @property
    def is_active(self) -> bool:
        return self in (WaitlistStatus.WAITING, WaitlistStatus.NOTIFIED)

    @property
    def is_terminal(self) -> bool:
        return not self.is_active


# Allowed waitlist transitions; terminal states have no outgoing edges
WAITLIST_TRANSITIONS = {
    WaitlistStatus.WAITING: {
        WaitlistStatus.NOTIFIED,
        WaitlistStatus.SEATED,
        WaitlistStatus.CANCELLED,
        WaitlistStatus.NO_SHOW,
    },
    WaitlistStatus.NOTIFIED: {
        WaitlistStatus.SEATED,
        WaitlistStatus.CANCELLED,
        WaitlistStatus.NO_SHOW,
    },
    WaitlistStatus.SEATED: set(),
    WaitlistStatus.CANCELLED: set(),
    WaitlistStatus.NO_SHOW: set(),
}


class WaitlistAction(str, Enum):
    """Mutation intents the host persists through its own write path"""

    ADD = "add"
    REORDER = "reorder"
    SET_STATUS = "set_status"
    MARK_ON_MY_WAY = "mark_on_my_way"


class CapacityLevel(str, Enum):
    """Hourly utilization severity"""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class PartySizeBucket(str, Enum):
    """Party size ranges used by turn time statistics"""

    SMALL = "1-2"
    MEDIUM = "3-4"
    LARGE = "5-6"
    EXTRA_LARGE = "7+"

    def contains(self, party_size: int) -> bool:
        if self is PartySizeBucket.SMALL:
            return party_size <= 2
        if self is PartySizeBucket.MEDIUM:
            return 3 <= party_size <= 4
        if self is PartySizeBucket.LARGE:
            return 5 <= party_size <= 6
        return party_size >= 7

    @classmethod
    def for_party_size(cls, party_size: int) -> "PartySizeBucket":
        for bucket in cls:
            if bucket.contains(party_size):
                return bucket
        return cls.EXTRA_LARGE

    @classmethod
    def from_label(cls, label: str) -> Optional["PartySizeBucket"]:
        """Resolve a statistics label, ignoring ones this engine does not know"""
        try:
            return cls(label.strip())
        except ValueError:
            return None
