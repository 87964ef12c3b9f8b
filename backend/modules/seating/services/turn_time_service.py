# backend/modules/seating/services/turn_time_service.py

"""
Turn time estimation from historical occupancy statistics.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

from ..config.seating_config import SeatingConfig, get_seating_config
from ..enums.seating_enums import PartySizeBucket
from ..schemas.seating_schemas import TurnTimeStats

logger = logging.getLogger(__name__)


def _whole_minutes(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TurnTimeModel:
    """Answers how many minutes a party is expected to occupy a table"""

    def __init__(
        self,
        stats: Optional[TurnTimeStats] = None,
        config: Optional[SeatingConfig] = None,
    ):
        self.config = config or get_seating_config()
        self.stats = stats

    def load(self, stats: Optional[TurnTimeStats]):
        """Replace the statistics snapshot (None clears it)"""
        self.stats = stats
        if stats is not None:
            logger.debug(
                f"Loaded turn time stats: overall={stats.overall}, "
                f"{len(stats.by_party_size)} party size buckets, sample={stats.sample_size}"
            )

    @property
    def default_minutes(self) -> int:
        return self.config.DEFAULT_TURN_TIME_MINUTES

    @property
    def dynamic_turn_time(self) -> int:
        """Blended turn time used for waitlist estimates, not bucketed"""
        if self.stats is None or self.stats.overall <= 0:
            return self.default_minutes
        return _whole_minutes(self.stats.overall)

    @staticmethod
    def bucket_for(party_size: int) -> PartySizeBucket:
        return PartySizeBucket.for_party_size(party_size)

    def estimate_minutes(self, party_size: int) -> int:
        """
        Estimate table occupancy for a party.

        Uses the party size bucket average when the statistics carry a
        positive one, otherwise the overall average, otherwise the default.
        """
        if self.stats is None:
            return self.default_minutes

        bucket = self.bucket_for(party_size)
        match = next(
            (
                entry
                for entry in self.stats.by_party_size
                if PartySizeBucket.from_label(entry.range) is bucket
            ),
            None,
        )

        if match is not None and match.avg_minutes > 0:
            return _whole_minutes(match.avg_minutes)

        return self.dynamic_turn_time
