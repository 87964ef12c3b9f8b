from .waitlist_models import WaitlistEntryRecord, WaitlistQueueState

__all__ = ["WaitlistEntryRecord", "WaitlistQueueState"]
