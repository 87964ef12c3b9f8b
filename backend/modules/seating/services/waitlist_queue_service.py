# backend/modules/seating/services/waitlist_queue_service.py

"""
Position-based waitlist queue.

The queue is an in-memory view over a waitlist snapshot. Every mutation
updates the view and records ``WaitlistIntent``s that the host drains and
persists through its own store. Active entries (waiting or notified)
always hold the positions 1..N; a single renumbering routine restores that
after each change.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union
import logging
import uuid

from ..config.seating_config import SeatingConfig, get_seating_config
from ..enums.seating_enums import WAITLIST_TRANSITIONS, WaitlistAction, WaitlistStatus
from ..schemas.seating_schemas import (
    WaitlistEntry,
    WaitlistEntryCreate,
    WaitlistIntent,
    WaitlistSnapshot,
)
from .turn_time_service import TurnTimeModel

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps from the backend are UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_elapsed(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"


def format_clock_time(value: datetime) -> str:
    """12-hour clock label such as "7:05 PM" """
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


class WaitlistQueue:
    """Ordered waitlist with lifecycle transitions and wait estimates"""

    def __init__(
        self,
        entries: Iterable[WaitlistEntry] = (),
        turn_time_model: Optional[TurnTimeModel] = None,
        config: Optional[SeatingConfig] = None,
        revision: int = 0,
    ):
        self.config = config or get_seating_config()
        self.turn_time_model = turn_time_model or TurnTimeModel(config=self.config)
        # Store revision the entries were read at
        self.revision = revision
        self._entries = {}
        self._order: List[str] = []
        self._pending: List[WaitlistIntent] = []
        self._load(entries)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WaitlistSnapshot,
        turn_time_model: Optional[TurnTimeModel] = None,
        config: Optional[SeatingConfig] = None,
    ) -> "WaitlistQueue":
        return cls(
            snapshot.entries,
            turn_time_model=turn_time_model,
            config=config,
            revision=snapshot.revision,
        )

    def _load(self, entries: Iterable[WaitlistEntry]):
        active = []
        duplicates = 0
        for entry in entries:
            if entry.id in self._entries:
                duplicates += 1
                continue
            entry = entry.model_copy()
            self._entries[entry.id] = entry
            if entry.is_active:
                active.append(entry)
            else:
                entry.position = None

        # Entries without a position go to the back in arrival order
        active.sort(
            key=lambda e: (
                e.position is None,
                e.position or 0,
                as_utc(e.created_at),
            )
        )
        self._order = [entry.id for entry in active]

        if duplicates:
            logger.warning(f"Waitlist snapshot repeated {duplicates} entry ids; kept the first of each")

        repaired = self._renumber()
        if repaired:
            logger.warning(
                f"Waitlist snapshot positions were not contiguous; "
                f"renumbered {repaired} entries"
            )

    def _renumber(self) -> int:
        """Assign positions 1..N in queue order, recording each change"""
        changed = 0
        for position, entry_id in enumerate(self._order, 1):
            entry = self._entries[entry_id]
            if entry.position != position:
                entry.position = position
                self._pending.append(
                    WaitlistIntent(
                        action=WaitlistAction.REORDER,
                        entry_id=entry_id,
                        position=position,
                    )
                )
                changed += 1
        return changed

    def _active_index(self, entry_id: str) -> Optional[int]:
        try:
            return self._order.index(entry_id)
        except ValueError:
            return None

    # Views

    @property
    def count(self) -> int:
        return len(self._order)

    def get(self, entry_id: str) -> Optional[WaitlistEntry]:
        entry = self._entries.get(entry_id)
        return entry.model_copy() if entry else None

    def active_entries(self) -> List[WaitlistEntry]:
        return [self._entries[entry_id].model_copy() for entry_id in self._order]

    def all_entries(self) -> List[WaitlistEntry]:
        return [entry.model_copy() for entry in self._entries.values()]

    def positions(self) -> List[int]:
        return [self._entries[entry_id].position for entry_id in self._order]

    def on_my_way_entries(self) -> List[WaitlistEntry]:
        """Waiting guests who have told us they are on their way"""
        return [
            entry
            for entry in self.active_entries()
            if entry.status == WaitlistStatus.WAITING and entry.is_on_my_way
        ]

    def overdue_notified(self, now: Optional[datetime] = None) -> List[WaitlistEntry]:
        """Notified guests who have not arrived within the auto-remove window"""
        now = as_utc(now or utcnow())
        cutoff = timedelta(minutes=self.config.WAITLIST_AUTO_REMOVE_MINUTES)
        return [
            entry
            for entry in self.active_entries()
            if entry.status == WaitlistStatus.NOTIFIED
            and entry.notified_at is not None
            and now - as_utc(entry.notified_at) >= cutoff
        ]

    # Intents

    @property
    def pending_intents(self) -> List[WaitlistIntent]:
        return list(self._pending)

    def drain_intents(self) -> List[WaitlistIntent]:
        """Hand over the recorded changes and forget them"""
        intents, self._pending = self._pending, []
        return intents

    # Mutations

    def add(
        self,
        data: WaitlistEntryCreate,
        entry_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WaitlistEntry:
        """Append a party to the end of the queue"""
        if entry_id is not None and entry_id in self._entries:
            logger.debug(f"Waitlist entry {entry_id} already exists; add ignored")
            return self.get(entry_id)

        now = now or utcnow()
        entry = WaitlistEntry(
            id=entry_id or str(uuid.uuid4()),
            party_name=data.party_name,
            party_size=data.party_size,
            phone=data.phone,
            notes=data.notes,
            status=WaitlistStatus.WAITING,
            position=self.count + 1,
            estimated_wait_minutes=data.estimated_wait_minutes,
            created_at=now,
            updated_at=now,
        )
        entry.quoted_wait_minutes = self.estimated_wait_minutes(entry)

        self._entries[entry.id] = entry
        self._order.append(entry.id)
        self._pending.append(
            WaitlistIntent(
                action=WaitlistAction.ADD,
                entry_id=entry.id,
                entry=entry.model_copy(),
                position=entry.position,
            )
        )

        logger.info(
            f"Added party of {entry.party_size} to waitlist at position {entry.position}"
        )
        return entry.model_copy()

    def move_up(self, entry_id: str) -> bool:
        """Swap with the party one place ahead; no-op at the front"""
        index = self._active_index(entry_id)
        if index is None or index == 0:
            logger.debug(f"move_up ignored for waitlist entry {entry_id}")
            return False

        self._order[index - 1], self._order[index] = self._order[index], self._order[index - 1]
        self._renumber()
        return True

    def move_down(self, entry_id: str) -> bool:
        """Swap with the party one place behind; no-op at the back"""
        index = self._active_index(entry_id)
        if index is None or index == len(self._order) - 1:
            logger.debug(f"move_down ignored for waitlist entry {entry_id}")
            return False

        self._order[index + 1], self._order[index] = self._order[index], self._order[index + 1]
        self._renumber()
        return True

    def reorder(self, entry_id: str, new_position: int) -> bool:
        """Move an entry to ``new_position`` (clamped to the queue length)"""
        index = self._active_index(entry_id)
        if index is None:
            logger.debug(f"reorder ignored for unknown or inactive entry {entry_id}")
            return False

        target = min(max(new_position, 1), len(self._order)) - 1
        if target == index:
            return False

        self._order.insert(target, self._order.pop(index))
        self._renumber()
        return True

    def set_status(
        self,
        entry_id: str,
        status: Union[WaitlistStatus, str],
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Apply a lifecycle transition.

        Terminal statuses (seated, cancelled, no-show) take the entry out
        of the queue and close the gap behind it. Illegal transitions and
        unknown entries are ignored.
        """
        entry = self._entries.get(entry_id)
        if entry is None:
            logger.debug(f"Status change ignored for unknown waitlist entry {entry_id}")
            return False

        try:
            status = WaitlistStatus(status)
        except ValueError:
            logger.debug(f"Status change ignored for unknown status {status!r}")
            return False

        if status not in WAITLIST_TRANSITIONS[entry.status]:
            logger.debug(
                f"Waitlist entry {entry_id} cannot move from "
                f"{entry.status.value} to {status.value}"
            )
            return False

        now = now or utcnow()
        previous = entry.status
        entry.status = status
        entry.updated_at = now
        if status == WaitlistStatus.NOTIFIED:
            entry.notified_at = now
        elif status == WaitlistStatus.SEATED:
            entry.seated_at = now

        self._pending.append(
            WaitlistIntent(
                action=WaitlistAction.SET_STATUS,
                entry_id=entry_id,
                status=status,
                timestamp=now,
            )
        )

        if status.is_terminal:
            self._order.remove(entry_id)
            entry.position = None
            self._renumber()

        logger.info(
            f"Waitlist entry {entry_id} moved from {previous.value} to {status.value}"
        )
        return True

    def notify(self, entry_id: str, now: Optional[datetime] = None) -> bool:
        return self.set_status(entry_id, WaitlistStatus.NOTIFIED, now)

    def seat(self, entry_id: str, now: Optional[datetime] = None) -> bool:
        return self.set_status(entry_id, WaitlistStatus.SEATED, now)

    def cancel(self, entry_id: str, now: Optional[datetime] = None) -> bool:
        return self.set_status(entry_id, WaitlistStatus.CANCELLED, now)

    def mark_no_show(self, entry_id: str, now: Optional[datetime] = None) -> bool:
        return self.set_status(entry_id, WaitlistStatus.NO_SHOW, now)

    def remove(self, entry_id: str, now: Optional[datetime] = None) -> bool:
        """Take a party off the list; recorded as a cancellation"""
        return self.cancel(entry_id, now)

    def mark_on_my_way(self, entry_id: str, timestamp: Optional[datetime] = None) -> bool:
        """Record that the guest is en route; the status is left alone"""
        entry = self._entries.get(entry_id)
        if entry is None or not entry.is_active or entry.is_on_my_way:
            logger.debug(f"mark_on_my_way ignored for waitlist entry {entry_id}")
            return False

        timestamp = timestamp or utcnow()
        entry.on_my_way_at = timestamp
        entry.updated_at = timestamp
        self._pending.append(
            WaitlistIntent(
                action=WaitlistAction.MARK_ON_MY_WAY,
                entry_id=entry_id,
                timestamp=timestamp,
            )
        )
        return True

    # Estimates

    def estimated_wait_minutes(self, entry: WaitlistEntry) -> int:
        """
        Server override when present and positive, otherwise the entry's
        position times the current blended turn time.
        """
        if entry.estimated_wait_minutes and entry.estimated_wait_minutes > 0:
            return entry.estimated_wait_minutes
        if entry.position is None:
            return 0
        return entry.position * self.turn_time_model.dynamic_turn_time

    @staticmethod
    def elapsed_wait(entry: WaitlistEntry, now: Optional[datetime] = None) -> str:
        """Time since the party joined, e.g. "42m" or "1h 5m" """
        now = as_utc(now or utcnow())
        seconds = (now - as_utc(entry.created_at)).total_seconds()
        return format_elapsed(max(int(seconds // 60), 0))

    @staticmethod
    def on_my_way_time(entry: WaitlistEntry) -> str:
        if entry.on_my_way_at is None:
            return ""
        return format_clock_time(entry.on_my_way_at)
