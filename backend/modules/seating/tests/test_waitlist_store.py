# backend/modules/seating/tests/test_waitlist_store.py

"""
Tests for waitlist persistence stores.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from ..enums.seating_enums import WaitlistAction, WaitlistStatus
from ..exceptions import WaitlistConflictError, WaitlistEntryNotFoundError
from ..models.waitlist_models import WaitlistEntryRecord, WaitlistQueueState
from ..schemas.seating_schemas import WaitlistEntryCreate, WaitlistIntent
from ..services.waitlist_queue_service import WaitlistQueue
from ..stores.waitlist_store import InMemoryWaitlistStore, SQLAlchemyWaitlistStore

RESTAURANT_ID = "rest-1"


def party(name):
    return WaitlistEntryCreate(party_name=name, party_size=2, phone="555-0100")


def seed(store, config, names=("Alvarez", "Baker", "Chen")):
    queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
    for name in names:
        queue.add(party(name), entry_id=name.lower())
    store.save(RESTAURANT_ID, queue)
    return queue


def active_positions(snapshot):
    return sorted(e.position for e in snapshot.entries if e.is_active)


def stale_pair_conflicts(store_a, store_b, config, change_a, change_b):
    """Load two queues at the same revision, save A, then try to save B"""
    queue_a = WaitlistQueue.from_snapshot(store_a.load(RESTAURANT_ID), config=config)
    queue_b = WaitlistQueue.from_snapshot(store_b.load(RESTAURANT_ID), config=config)
    assert queue_a.revision == queue_b.revision

    change_a(queue_a)
    store_a.save(RESTAURANT_ID, queue_a)

    change_b(queue_b)
    with pytest.raises(WaitlistConflictError) as exc_info:
        store_b.save(RESTAURANT_ID, queue_b)
    return exc_info.value


def add_party(name):
    return lambda queue: queue.add(party(name), entry_id=name.lower())


class TestInMemoryWaitlistStore:
    """Test the lock-guarded dict store"""

    @pytest.fixture
    def store(self, config):
        store = InMemoryWaitlistStore()
        seed(store, config)
        return store

    def test_round_trip(self, store):
        """Test added entries load back in position order at revision 1"""
        snapshot = store.load(RESTAURANT_ID)

        assert snapshot.revision == 1
        assert [e.id for e in snapshot.entries] == ["alvarez", "baker", "chen"]
        assert [e.position for e in snapshot.entries] == [1, 2, 3]

    def test_applies_reorder_and_status(self, store, config):
        """Test queue changes persist across loads"""
        queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
        queue.move_up("chen")
        queue.seat("alvarez")

        assert store.save(RESTAURANT_ID, queue) == 2
        assert queue.revision == 2
        assert queue.pending_intents == []

        reloaded = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
        assert reloaded.revision == 2
        assert [e.id for e in reloaded.active_entries()] == ["chen", "baker"]
        assert reloaded.positions() == [1, 2]
        assert reloaded.get("alvarez").status == WaitlistStatus.SEATED
        assert reloaded.get("alvarez").seated_at is not None
        assert reloaded.pending_intents == []

    def test_sequential_saves_from_one_queue(self, store, config):
        """Test a queue keeps saving after its own writes"""
        queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
        queue.notify("alvarez")
        store.save(RESTAURANT_ID, queue)
        queue.seat("alvarez")
        store.save(RESTAURANT_ID, queue)

        assert store.load(RESTAURANT_ID).revision == 3

    def test_save_without_changes(self, store, config):
        """Test saving an unchanged queue leaves the revision alone"""
        queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)

        assert store.save(RESTAURANT_ID, queue) == 1
        assert store.load(RESTAURANT_ID).revision == 1

    def test_restaurants_are_isolated(self, store):
        """Test entries and revisions are scoped to one restaurant"""
        snapshot = store.load("rest-2")

        assert snapshot.entries == []
        assert snapshot.revision == 0

    def test_unknown_entry_rejects_whole_batch(self, store):
        """Test a failing intent leaves earlier intents in the batch unapplied"""
        intents = [
            WaitlistIntent(action=WaitlistAction.REORDER, entry_id="baker", position=1),
            WaitlistIntent(action=WaitlistAction.REORDER, entry_id="nobody", position=2),
        ]

        with pytest.raises(WaitlistEntryNotFoundError) as exc_info:
            store.apply(RESTAURANT_ID, intents, expected_revision=1)

        snapshot = store.load(RESTAURANT_ID)
        assert exc_info.value.entry_id == "nobody"
        assert [e.position for e in snapshot.entries] == [1, 2, 3]
        assert snapshot.revision == 1

    def test_loaded_entries_are_copies(self, store):
        """Test callers cannot mutate stored entries"""
        store.load(RESTAURANT_ID).entries[0].position = 9

        assert store.load(RESTAURANT_ID).entries[0].position == 1

    def test_concurrent_adds_conflict(self, store, config):
        """Test two writers adding from the same revision cannot both win"""
        error = stale_pair_conflicts(store, store, config, add_party("Diaz"), add_party("Eve"))

        snapshot = store.load(RESTAURANT_ID)
        assert error.code == "WAITLIST_CONFLICT"
        assert active_positions(snapshot) == [1, 2, 3, 4]
        assert "eve" not in [e.id for e in snapshot.entries]

    def test_remove_racing_add_conflicts(self, store, config):
        """Test an add computed before a removal is rejected"""
        stale_pair_conflicts(
            store, store, config, lambda q: q.remove("alvarez"), add_party("Eve")
        )

        assert active_positions(store.load(RESTAURANT_ID)) == [1, 2]

    def test_stale_apply_leaves_queue_untouched(self, store):
        """Test a rejected batch changes neither entries nor revision"""
        with pytest.raises(WaitlistConflictError):
            store.apply(
                RESTAURANT_ID,
                [WaitlistIntent(action=WaitlistAction.REORDER, entry_id="chen", position=1)],
                expected_revision=0,
            )

        snapshot = store.load(RESTAURANT_ID)
        assert snapshot.revision == 1
        assert [e.id for e in snapshot.entries] == ["alvarez", "baker", "chen"]


class TestSQLAlchemyWaitlistStore:
    """Test the revision-checked SQLAlchemy store"""

    @pytest.fixture
    def store(self, db_session, config):
        store = SQLAlchemyWaitlistStore(db_session)
        seed(store, config)
        return store

    @pytest.fixture
    def session_factory(self, tmp_path):
        """Two sessions need a shared file database"""
        engine = create_engine(f"sqlite:///{tmp_path / 'waitlist.db'}")
        Base.metadata.create_all(bind=engine)
        sessions = []

        def make_session():
            session = sessionmaker(bind=engine, autoflush=False)()
            sessions.append(session)
            return session

        yield make_session

        for session in sessions:
            session.close()
        engine.dispose()

    def test_round_trip(self, store, db_session):
        """Test rows are written with positions and a queue revision"""
        snapshot = store.load(RESTAURANT_ID)

        assert snapshot.revision == 1
        assert [e.id for e in snapshot.entries] == ["alvarez", "baker", "chen"]
        assert [e.position for e in snapshot.entries] == [1, 2, 3]
        assert [e.quoted_wait_minutes for e in snapshot.entries] == [45, 90, 135]
        assert db_session.query(WaitlistEntryRecord).count() == 3

    def test_applies_queue_changes(self, store, config):
        """Test terminal rows lose their position and the rest close the gap"""
        queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
        queue.notify("baker")
        queue.cancel("alvarez")
        queue.mark_on_my_way("chen")
        store.save(RESTAURANT_ID, queue)

        entries = {e.id: e for e in store.load(RESTAURANT_ID).entries}
        assert entries["alvarez"].status == WaitlistStatus.CANCELLED
        assert entries["alvarez"].position is None
        assert (entries["baker"].status, entries["baker"].position) == (WaitlistStatus.NOTIFIED, 1)
        assert entries["baker"].notified_at is not None
        assert entries["chen"].position == 2
        assert entries["chen"].on_my_way_at is not None

    def test_revision_increments_per_write(self, store, db_session, config):
        """Test each committed batch bumps the queue revision once"""
        queue = WaitlistQueue.from_snapshot(store.load(RESTAURANT_ID), config=config)
        queue.move_up("baker")
        store.save(RESTAURANT_ID, queue)

        state = db_session.query(WaitlistQueueState).filter_by(restaurant_id=RESTAURANT_ID).one()
        assert state.revision == 2
        assert queue.revision == 2

    def test_empty_batch(self, store):
        """Test applying nothing is a no-op"""
        assert store.apply(RESTAURANT_ID, [], expected_revision=1) == 1

    def test_unknown_entry_rolls_back(self, store):
        """Test a missing row rolls back the whole batch and the revision"""
        intents = [
            WaitlistIntent(action=WaitlistAction.REORDER, entry_id="baker", position=1),
            WaitlistIntent(action=WaitlistAction.REORDER, entry_id="nobody", position=2),
        ]

        with pytest.raises(WaitlistEntryNotFoundError):
            store.apply(RESTAURANT_ID, intents, expected_revision=1)

        snapshot = store.load(RESTAURANT_ID)
        assert [e.position for e in snapshot.entries] == [1, 2, 3]
        assert snapshot.revision == 1

    def test_stale_reorder_conflicts(self, session_factory, config):
        """Test a writer holding a stale snapshot is rejected"""
        seed(SQLAlchemyWaitlistStore(session_factory()), config)
        store_a = SQLAlchemyWaitlistStore(session_factory())
        store_b = SQLAlchemyWaitlistStore(session_factory())

        error = stale_pair_conflicts(
            store_b, store_a, config,
            lambda q: q.move_up("chen"),
            lambda q: q.move_up("baker"),
        )

        assert error.code == "WAITLIST_CONFLICT"
        # The loser reloads and sees the winner's order
        reloaded = WaitlistQueue.from_snapshot(store_a.load(RESTAURANT_ID), config=config)
        assert [e.id for e in reloaded.active_entries()] == ["alvarez", "chen", "baker"]
        assert reloaded.revision == 2

    def test_concurrent_adds_conflict(self, session_factory, config):
        """Test two adds from the same revision cannot duplicate a position"""
        seed(SQLAlchemyWaitlistStore(session_factory()), config)
        store_a = SQLAlchemyWaitlistStore(session_factory())
        store_b = SQLAlchemyWaitlistStore(session_factory())

        stale_pair_conflicts(store_a, store_b, config, add_party("Diaz"), add_party("Eve"))

        snapshot = SQLAlchemyWaitlistStore(session_factory()).load(RESTAURANT_ID)
        assert active_positions(snapshot) == [1, 2, 3, 4]
        assert "eve" not in [e.id for e in snapshot.entries]

    def test_remove_racing_add_conflicts(self, session_factory, config):
        """Test an add computed before a removal cannot leave a gap"""
        seed(SQLAlchemyWaitlistStore(session_factory()), config)
        store_a = SQLAlchemyWaitlistStore(session_factory())
        store_b = SQLAlchemyWaitlistStore(session_factory())

        stale_pair_conflicts(
            store_a, store_b, config, lambda q: q.remove("alvarez"), add_party("Eve")
        )

        snapshot = SQLAlchemyWaitlistStore(session_factory()).load(RESTAURANT_ID)
        assert active_positions(snapshot) == [1, 2]

    def test_first_writes_race(self, session_factory, config):
        """Test two writers creating the same queue cannot both win"""
        store_a = SQLAlchemyWaitlistStore(session_factory())
        store_b = SQLAlchemyWaitlistStore(session_factory())

        stale_pair_conflicts(store_a, store_b, config, add_party("Diaz"), add_party("Eve"))

        snapshot = SQLAlchemyWaitlistStore(session_factory()).load(RESTAURANT_ID)
        assert [e.id for e in snapshot.entries] == ["diaz"]
        assert snapshot.revision == 1
