# backend/modules/seating/models/waitlist_models.py

"""
Reference persistence models for waitlist entries and their queue revision.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, Index

from core.database import Base
from core.mixins import TimestampMixin, RestaurantMixin
from ..enums.seating_enums import WaitlistStatus


class WaitlistEntryRecord(Base, RestaurantMixin, TimestampMixin):
    """Waitlist entry row scoped to one restaurant"""
    __tablename__ = "seating_waitlist_entries"

    id = Column(String(64), primary_key=True)

    # Party details
    party_name = Column(String(200), nullable=False)
    party_size = Column(Integer, nullable=False)
    phone = Column(String(40), default="")
    notes = Column(Text)

    # Queue state
    status = Column(Enum(WaitlistStatus), default=WaitlistStatus.WAITING, nullable=False, index=True)
    position = Column(Integer)  # Null once the entry leaves the queue
    estimated_wait_minutes = Column(Integer)  # Server override
    quoted_wait_minutes = Column(Integer)

    # Lifecycle timestamps
    notified_at = Column(DateTime)
    on_my_way_at = Column(DateTime)
    seated_at = Column(DateTime)

    __table_args__ = (
        Index("idx_waitlist_restaurant_status_position", "restaurant_id", "status", "position"),
    )

    def __repr__(self):
        return f"<WaitlistEntryRecord {self.id} - {self.party_name} #{self.position} ({self.status})>"


class WaitlistQueueState(Base, TimestampMixin):
    """
    One row per restaurant queue. ``revision`` is bumped by every write so a
    writer that loaded an older revision is rejected.
    """
    __tablename__ = "seating_waitlist_queue_state"

    restaurant_id = Column(String(64), primary_key=True)
    revision = Column(Integer, nullable=False, default=0)
