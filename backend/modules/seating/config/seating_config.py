# backend/modules/seating/config/seating_config.py

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SeatingConfig(BaseSettings):
    """
    Configuration for the reservation timeline and waitlist engine.

    The timeline axis is a fixed display window, independent of the
    restaurant's real opening hours.
    """

    model_config = SettingsConfigDict(env_prefix="SEATING_", case_sensitive=False)

    # Timeline axis (hours of the day, end is exclusive)
    DAY_START_HOUR: int = 9
    DAY_END_HOUR: int = 24

    # Used for every party size when no turn time statistics are loaded
    DEFAULT_TURN_TIME_MINUTES: int = 45

    # Utilization thresholds (percent of total seats)
    CAPACITY_WARNING_PERCENT: float = 70.0
    CAPACITY_CRITICAL_PERCENT: float = 90.0

    # Narrowest block the timeline will draw, as percent of the axis
    MIN_BLOCK_WIDTH_PERCENT: float = 1.5

    # Notified guests who have not shown up after this many minutes
    WAITLIST_AUTO_REMOVE_MINUTES: int = 15

    # Row used for reservations without a usable table
    UNASSIGNED_TABLE_ID: str = "unassigned"
    UNASSIGNED_TABLE_NAME: str = "Unassigned"

    @model_validator(mode="after")
    def validate_day_window(self):
        if not 0 <= self.DAY_START_HOUR < self.DAY_END_HOUR <= 24:
            raise ValueError("DAY_END_HOUR must be after DAY_START_HOUR within 0-24")
        if self.CAPACITY_WARNING_PERCENT > self.CAPACITY_CRITICAL_PERCENT:
            raise ValueError("CAPACITY_WARNING_PERCENT cannot exceed CAPACITY_CRITICAL_PERCENT")
        return self

    @property
    def day_window_minutes(self) -> int:
        return (self.DAY_END_HOUR - self.DAY_START_HOUR) * 60

    @property
    def hour_count(self) -> int:
        return self.DAY_END_HOUR - self.DAY_START_HOUR


# Global instance
seating_config = SeatingConfig()


def get_seating_config() -> SeatingConfig:
    """Get the seating engine configuration."""
    return seating_config
