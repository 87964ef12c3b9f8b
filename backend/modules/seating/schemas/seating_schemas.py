# backend/modules/seating/schemas/seating_schemas.py

"""
Pydantic schemas for the seating timeline and waitlist engine.

Snapshots (reservations, tables, turn time statistics, waitlist entries)
are read-only inputs handed over by the data-access layer. Timeline blocks
and capacity rows are derived on every read and never persisted.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums.seating_enums import (
    CapacityLevel,
    ReservationStatus,
    WaitlistAction,
    WaitlistStatus,
)


# Input snapshots
class ReservationSnapshot(BaseModel):
    """Reservation as read from the booking backend"""

    id: str
    party_size: int = Field(..., ge=1)
    reservation_time: datetime
    status: ReservationStatus = ReservationStatus.PENDING
    table_number: Optional[int] = None
    business_date: Optional[date] = None
    customer_name: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class TableSnapshot(BaseModel):
    """Dining table as configured in the floor plan"""

    id: str
    table_number: int
    table_name: Optional[str] = None
    capacity: int = Field(..., ge=1)
    section: str = ""
    active: bool = True
    model_config = ConfigDict(from_attributes=True)

    @field_validator("section", mode="before")
    @classmethod
    def default_section(cls, v):
        return v or ""

    @property
    def display_name(self) -> str:
        return self.table_name or f"Table {self.table_number}"


class PartySizeTurnTime(BaseModel):
    """Average occupancy for one party size range, e.g. "3-4" """

    range: str
    avg_minutes: float = Field(..., ge=0)


class LabeledTurnTime(BaseModel):
    """Average occupancy for a meal period or day of week"""

    label: str
    avg_minutes: float = Field(..., ge=0)


class TurnTimeStats(BaseModel):
    """Historical turn time statistics for a restaurant"""

    overall: float = Field(..., ge=0)
    by_party_size: List[PartySizeTurnTime] = []
    by_meal_period: List[LabeledTurnTime] = []
    by_day_of_week: List[LabeledTurnTime] = []
    sample_size: int = Field(0, ge=0)


# Timeline
class TimelineBlock(BaseModel):
    """One reservation's occupancy window on the table/time grid"""

    reservation: ReservationSnapshot
    start_minute: int
    duration_minutes: int
    table_id: str
    table_name: str

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    @property
    def party_size(self) -> int:
        return self.reservation.party_size


class TimelineRow(BaseModel):
    """A table (or the unassigned bucket) with the blocks drawn on it"""

    table_id: str
    name: str
    capacity: int
    section: str
    blocks: List[TimelineBlock] = []


class BlockPosition(BaseModel):
    """Horizontal placement of a block, in percent of the day window"""

    left_percent: float
    width_percent: float


class CapacityRow(BaseModel):
    """Seated covers against total seats for one hour of the day"""

    hour: str
    hour_index: int
    covers: int
    max_covers: int
    percent: float
    level: CapacityLevel


# Waitlist
class WaitlistEntryCreate(BaseModel):
    """Walk-in party joining the waitlist"""

    party_name: str = Field(..., min_length=1, max_length=200)
    party_size: int = Field(..., ge=1)
    phone: str = ""
    notes: Optional[str] = Field(None, max_length=500)
    estimated_wait_minutes: Optional[int] = Field(None, ge=0)

    @field_validator("party_name")
    @classmethod
    def validate_party_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Party name cannot be blank")
        return v

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v):
        return v.strip()

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v):
        if v is None:
            return None
        return v.strip() or None


class WaitlistEntry(BaseModel):
    """Waitlist entry as held by the system of record"""

    id: str
    party_name: str
    party_size: int = Field(..., ge=1)
    phone: str = ""
    notes: Optional[str] = None
    status: WaitlistStatus = WaitlistStatus.WAITING
    position: Optional[int] = Field(None, ge=1)
    estimated_wait_minutes: Optional[int] = None
    quoted_wait_minutes: Optional[int] = None
    created_at: datetime
    notified_at: Optional[datetime] = None
    on_my_way_at: Optional[datetime] = None
    seated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def is_on_my_way(self) -> bool:
        return self.on_my_way_at is not None


class WaitlistIntent(BaseModel):
    """A single change the host must persist for the waitlist"""

    action: WaitlistAction
    entry_id: str
    entry: Optional[WaitlistEntry] = None
    position: Optional[int] = None
    status: Optional[WaitlistStatus] = None
    timestamp: Optional[datetime] = None


class WaitlistSnapshot(BaseModel):
    """Entries of one restaurant queue together with the revision they were read at"""

    restaurant_id: str
    revision: int = Field(0, ge=0)
    entries: List[WaitlistEntry] = []


# Waitlist analytics
class HourlyWaitStat(BaseModel):
    hour: int
    avg_wait: float
    count: int


class DailyWaitStat(BaseModel):
    day: str
    avg_wait: float
    count: int


class WaitlistAnalytics(BaseModel):
    """Outcome rates and wait times over finished waitlist entries"""

    total_entries: int = 0
    avg_wait_minutes: float = 0.0
    seated_rate: float = 0.0
    cancelled_rate: float = 0.0
    no_show_rate: float = 0.0
    by_hour: List[HourlyWaitStat] = []
    by_day: List[DailyWaitStat] = []
