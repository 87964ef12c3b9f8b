from .waitlist_store import (
    WaitlistStore,
    InMemoryWaitlistStore,
    SQLAlchemyWaitlistStore,
)

__all__ = ["WaitlistStore", "InMemoryWaitlistStore", "SQLAlchemyWaitlistStore"]
