# backend/modules/seating/stores/waitlist_store.py

"""
Stores that persist the waitlist queue's mutation intents.

The queue only describes changes; a store applies them atomically. Every
restaurant queue carries a revision that each write advances by one. A
writer whose queue was loaded at an older revision is rejected with
``WaitlistConflictError`` instead of leaving duplicate or gapped positions.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, Optional
import logging
import threading

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..enums.seating_enums import WaitlistAction, WaitlistStatus
from ..exceptions import WaitlistConflictError, WaitlistEntryNotFoundError
from ..models.waitlist_models import WaitlistEntryRecord, WaitlistQueueState
from ..schemas.seating_schemas import WaitlistEntry, WaitlistIntent, WaitlistSnapshot
from ..services.waitlist_queue_service import WaitlistQueue, as_utc, utcnow

logger = logging.getLogger(__name__)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def _apply_to_entry(entry: WaitlistEntry, intent: WaitlistIntent):
    """Apply one non-add intent to an entry in place"""
    if intent.action == WaitlistAction.REORDER:
        entry.position = intent.position
    elif intent.action == WaitlistAction.SET_STATUS:
        entry.status = intent.status
        if intent.status == WaitlistStatus.NOTIFIED:
            entry.notified_at = intent.timestamp
        elif intent.status == WaitlistStatus.SEATED:
            entry.seated_at = intent.timestamp
        if intent.status.is_terminal:
            entry.position = None
    elif intent.action == WaitlistAction.MARK_ON_MY_WAY:
        entry.on_my_way_at = intent.timestamp
    entry.updated_at = intent.timestamp or utcnow()


def _stale_revision(restaurant_id: str, current: int, expected: int) -> WaitlistConflictError:
    return WaitlistConflictError(
        f"Waitlist for restaurant {restaurant_id} is at revision {current}, "
        f"expected {expected}"
    )


class WaitlistStore(ABC):
    """Persistence boundary for one restaurant's waitlist"""

    @abstractmethod
    def load(self, restaurant_id: str) -> WaitlistSnapshot:
        """Every entry, active ones in position order, with the current revision"""

    @abstractmethod
    def apply(
        self,
        restaurant_id: str,
        intents: Iterable[WaitlistIntent],
        expected_revision: int,
    ) -> int:
        """
        Persist intents atomically if the queue is still at
        ``expected_revision``; returns the new revision.
        """

    def save(self, restaurant_id: str, queue: WaitlistQueue) -> int:
        """Persist a queue's pending intents and move it to the new revision"""
        intents = queue.pending_intents
        if not intents:
            return queue.revision

        queue.revision = self.apply(restaurant_id, intents, queue.revision)
        queue.drain_intents()
        return queue.revision


class InMemoryWaitlistStore(WaitlistStore):
    """Dict-backed store with a single-writer lock"""

    def __init__(self):
        self._entries: Dict[str, Dict[str, WaitlistEntry]] = {}
        self._revisions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def load(self, restaurant_id: str) -> WaitlistSnapshot:
        with self._lock:
            revision = self._revisions.get(restaurant_id, 0)
            entries = [e.model_copy() for e in self._entries.get(restaurant_id, {}).values()]
        entries.sort(key=lambda e: (e.position is None, e.position or 0, as_utc(e.created_at)))
        return WaitlistSnapshot(restaurant_id=restaurant_id, revision=revision, entries=entries)

    def apply(
        self,
        restaurant_id: str,
        intents: Iterable[WaitlistIntent],
        expected_revision: int,
    ) -> int:
        intents = list(intents)
        if not intents:
            return expected_revision

        with self._lock:
            current_revision = self._revisions.get(restaurant_id, 0)
            if current_revision != expected_revision:
                logger.error(
                    f"Rejected stale waitlist write for restaurant {restaurant_id}: "
                    f"revision {expected_revision}, current {current_revision}"
                )
                raise _stale_revision(restaurant_id, current_revision, expected_revision)

            current = self._entries.get(restaurant_id, {})
            staged = {entry_id: entry.model_copy() for entry_id, entry in current.items()}

            for intent in intents:
                if intent.action == WaitlistAction.ADD:
                    staged[intent.entry_id] = intent.entry.model_copy()
                    continue
                entry = staged.get(intent.entry_id)
                if entry is None:
                    raise WaitlistEntryNotFoundError(intent.entry_id)
                _apply_to_entry(entry, intent)

            revision = current_revision + 1
            self._entries[restaurant_id] = staged
            self._revisions[restaurant_id] = revision

        logger.info(
            f"Applied {len(intents)} waitlist intents for restaurant {restaurant_id} "
            f"(revision {revision})"
        )
        return revision


class SQLAlchemyWaitlistStore(WaitlistStore):
    """
    Store backed by ``WaitlistEntryRecord`` rows and a
    ``WaitlistQueueState`` row per restaurant.

    ``apply`` advances the revision with a conditional UPDATE before touching
    any entry, so of two writers holding the same revision only the first to
    commit succeeds; the other gets ``WaitlistConflictError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, restaurant_id: str) -> WaitlistSnapshot:
        # Revision first: entries read afterwards are never older than it
        state = (
            self.db.query(WaitlistQueueState)
            .filter(WaitlistQueueState.restaurant_id == restaurant_id)
            .first()
        )
        records = (
            self.db.query(WaitlistEntryRecord)
            .filter(WaitlistEntryRecord.restaurant_id == restaurant_id)
            .order_by(
                WaitlistEntryRecord.position.is_(None),
                WaitlistEntryRecord.position,
                WaitlistEntryRecord.created_at,
            )
            .all()
        )
        return WaitlistSnapshot(
            restaurant_id=restaurant_id,
            revision=state.revision if state else 0,
            entries=[WaitlistEntry.model_validate(record) for record in records],
        )

    def apply(
        self,
        restaurant_id: str,
        intents: Iterable[WaitlistIntent],
        expected_revision: int,
    ) -> int:
        intents = list(intents)
        if not intents:
            return expected_revision

        entry_ids = {intent.entry_id for intent in intents}
        try:
            revision = self._advance_revision(restaurant_id, expected_revision)

            records = {
                record.id: record
                for record in self.db.query(WaitlistEntryRecord)
                .populate_existing()
                .filter(
                    WaitlistEntryRecord.restaurant_id == restaurant_id,
                    WaitlistEntryRecord.id.in_(entry_ids),
                )
            }

            for intent in intents:
                if intent.action == WaitlistAction.ADD:
                    record = self._record_from_entry(restaurant_id, intent.entry)
                    self.db.add(record)
                    records[record.id] = record
                    continue

                record = records.get(intent.entry_id)
                if record is None:
                    raise WaitlistEntryNotFoundError(intent.entry_id)
                self._apply_to_record(record, intent)

            self.db.commit()

        except IntegrityError as e:
            # Another writer created the queue state or an entry id first
            self.db.rollback()
            logger.error(f"Waitlist conflict for restaurant {restaurant_id}: {str(e)}")
            raise WaitlistConflictError() from e
        except (WaitlistConflictError, WaitlistEntryNotFoundError, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error(f"Failed to apply waitlist intents for restaurant {restaurant_id}: {str(e)}")
            raise

        logger.info(
            f"Applied {len(intents)} waitlist intents for restaurant {restaurant_id} "
            f"(revision {revision})"
        )
        return revision

    def _advance_revision(self, restaurant_id: str, expected_revision: int) -> int:
        """Compare-and-set the queue revision; raises on a stale writer"""
        if expected_revision == 0:
            self.db.add(WaitlistQueueState(restaurant_id=restaurant_id, revision=1))
            self.db.flush()
            return 1

        matched = (
            self.db.query(WaitlistQueueState)
            .filter(
                WaitlistQueueState.restaurant_id == restaurant_id,
                WaitlistQueueState.revision == expected_revision,
            )
            .update(
                {WaitlistQueueState.revision: expected_revision + 1},
                synchronize_session=False,
            )
        )
        if matched != 1:
            state = (
                self.db.query(WaitlistQueueState)
                .filter(WaitlistQueueState.restaurant_id == restaurant_id)
                .first()
            )
            raise _stale_revision(
                restaurant_id, state.revision if state else 0, expected_revision
            )
        return expected_revision + 1

    @staticmethod
    def _record_from_entry(restaurant_id: str, entry: WaitlistEntry) -> WaitlistEntryRecord:
        return WaitlistEntryRecord(
            id=entry.id,
            restaurant_id=restaurant_id,
            party_name=entry.party_name,
            party_size=entry.party_size,
            phone=entry.phone,
            notes=entry.notes,
            status=entry.status,
            position=entry.position,
            estimated_wait_minutes=entry.estimated_wait_minutes,
            quoted_wait_minutes=entry.quoted_wait_minutes,
            notified_at=_naive_utc(entry.notified_at),
            on_my_way_at=_naive_utc(entry.on_my_way_at),
            seated_at=_naive_utc(entry.seated_at),
            created_at=_naive_utc(entry.created_at),
            updated_at=_naive_utc(entry.updated_at or entry.created_at),
        )

    @staticmethod
    def _apply_to_record(record: WaitlistEntryRecord, intent: WaitlistIntent):
        timestamp = _naive_utc(intent.timestamp or utcnow())

        if intent.action == WaitlistAction.REORDER:
            record.position = intent.position
        elif intent.action == WaitlistAction.SET_STATUS:
            record.status = intent.status
            if intent.status == WaitlistStatus.NOTIFIED:
                record.notified_at = timestamp
            elif intent.status == WaitlistStatus.SEATED:
                record.seated_at = timestamp
            if intent.status.is_terminal:
                record.position = None
        elif intent.action == WaitlistAction.MARK_ON_MY_WAY:
            record.on_my_way_at = timestamp

        record.updated_at = timestamp
