# backend/modules/seating/tests/conftest.py

import pytest
from datetime import date, datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base
from modules.seating.config.seating_config import SeatingConfig
from modules.seating.enums.seating_enums import ReservationStatus
from modules.seating.models.waitlist_models import WaitlistEntryRecord  # noqa
from modules.seating.schemas.seating_schemas import (
    PartySizeTurnTime,
    ReservationSnapshot,
    TableSnapshot,
    TurnTimeStats,
    WaitlistEntryCreate,
)
from modules.seating.services.turn_time_service import TurnTimeModel
from modules.seating.services.waitlist_queue_service import WaitlistQueue

SERVICE_DAY = date(2026, 3, 14)
QUEUE_OPENED_AT = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def config():
    return SeatingConfig()


@pytest.fixture
def turn_time_stats():
    """Statistics with every party size bucket populated"""
    return TurnTimeStats(
        overall=60,
        by_party_size=[
            PartySizeTurnTime(range="1-2", avg_minutes=45),
            PartySizeTurnTime(range="3-4", avg_minutes=60),
            PartySizeTurnTime(range="5-6", avg_minutes=75),
            PartySizeTurnTime(range="7+", avg_minutes=100),
        ],
        sample_size=240,
    )


@pytest.fixture
def turn_time_model(turn_time_stats, config):
    return TurnTimeModel(turn_time_stats, config=config)


@pytest.fixture
def tables():
    return [
        TableSnapshot(id="t-1", table_number=1, capacity=2, section="Main"),
        TableSnapshot(id="t-2", table_number=2, table_name="Window Booth", capacity=4, section="Main"),
        TableSnapshot(id="t-3", table_number=3, capacity=6, section="Patio"),
        TableSnapshot(id="t-4", table_number=4, capacity=8, section="Patio", active=False),
    ]


def make_reservation(
    reservation_id: str,
    hour: int,
    minute: int = 0,
    party_size: int = 2,
    table_number=None,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    day: date = SERVICE_DAY,
) -> ReservationSnapshot:
    return ReservationSnapshot(
        id=reservation_id,
        party_size=party_size,
        reservation_time=datetime(day.year, day.month, day.day, hour, minute),
        status=status,
        table_number=table_number,
    )


@pytest.fixture
def reservations():
    return [
        make_reservation("r-1", 12, 0, party_size=2, table_number=1),
        make_reservation("r-2", 12, 30, party_size=4, table_number=2),
        make_reservation("r-3", 19, 15, party_size=6, table_number=3),
        make_reservation("r-4", 20, 0, party_size=3),
        make_reservation("r-5", 19, 0, party_size=2, status=ReservationStatus.CANCELLED),
        make_reservation("r-6", 19, 0, party_size=2, day=SERVICE_DAY + timedelta(days=1)),
    ]


@pytest.fixture
def waitlist_queue(config):
    """Queue with three waiting parties, joined five minutes apart"""
    queue = WaitlistQueue(turn_time_model=TurnTimeModel(config=config), config=config)
    for index, (name, size) in enumerate([("Alvarez", 2), ("Baker", 4), ("Chen", 3)]):
        queue.add(
            WaitlistEntryCreate(party_name=name, party_size=size, phone="555-010%d" % index),
            entry_id=name.lower(),
            now=QUEUE_OPENED_AT + timedelta(minutes=5 * index),
        )
    queue.drain_intents()
    return queue
