# backend/modules/seating/exceptions.py

"""
Exceptions raised at the waitlist persistence boundary.

The timeline and queue computations themselves never raise; these only
surface when a store cannot apply the queue's intents.
"""

from typing import Optional


class SeatingException(Exception):
    """Base exception for the seating module"""
    def __init__(self, message: str, code: str = "SEATING_ERROR", entry_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.entry_id = entry_id


class WaitlistConflictError(SeatingException):
    """Another writer changed the waitlist since it was loaded"""
    def __init__(self, message: str = "Waitlist was modified concurrently", entry_id: Optional[str] = None):
        super().__init__(message=message, code="WAITLIST_CONFLICT", entry_id=entry_id)


class WaitlistEntryNotFoundError(SeatingException):
    """An intent references an entry the store does not hold"""
    def __init__(self, entry_id: str):
        super().__init__(
            message=f"Waitlist entry {entry_id} not found",
            code="WAITLIST_ENTRY_NOT_FOUND",
            entry_id=entry_id,
        )
