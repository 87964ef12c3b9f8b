# backend/modules/seating/services/capacity_service.py

"""
Hourly seating capacity derived from timeline blocks.
"""

from typing import Iterable, List, Optional
import logging

from ..config.seating_config import SeatingConfig, get_seating_config
from ..enums.seating_enums import CapacityLevel
from ..schemas.seating_schemas import CapacityRow, TableSnapshot, TimelineBlock

logger = logging.getLogger(__name__)


def capacity_percent(covers: int, max_covers: int) -> float:
    """Utilization in percent, capped at 100; zero seats means 0%"""
    if max_covers <= 0:
        return 0.0
    return min(covers / max_covers * 100, 100.0)


def capacity_level(
    covers: int,
    max_covers: int,
    config: Optional[SeatingConfig] = None,
) -> CapacityLevel:
    config = config or get_seating_config()
    pct = capacity_percent(covers, max_covers)
    if pct >= config.CAPACITY_CRITICAL_PERCENT:
        return CapacityLevel.CRITICAL
    if pct >= config.CAPACITY_WARNING_PERCENT:
        return CapacityLevel.WARNING
    return CapacityLevel.NORMAL


def overlaps(block: TimelineBlock, window_start: int, window_end: int) -> bool:
    """Half-open interval test: [start, end) against [window_start, window_end)"""
    return block.start_minute < window_end and block.end_minute > window_start


class CapacityAggregator:
    """Buckets timeline blocks into hourly covers-vs-seats rows"""

    def __init__(self, config: Optional[SeatingConfig] = None):
        self.config = config or get_seating_config()

    @staticmethod
    def total_seats(tables: Iterable[TableSnapshot]) -> int:
        return sum(table.capacity for table in tables if table.active)

    def hourly_capacity(
        self,
        blocks: Iterable[TimelineBlock],
        tables: Iterable[TableSnapshot],
    ) -> List[CapacityRow]:
        """One row per hour of the business-day window"""
        blocks = list(blocks)
        max_covers = self.total_seats(tables)
        rows = []

        for hour_index in range(self.config.hour_count):
            window_start = hour_index * 60
            window_end = window_start + 60

            covers = sum(
                block.party_size
                for block in blocks
                if overlaps(block, window_start, window_end)
            )

            rows.append(
                CapacityRow(
                    hour=f"{self.config.DAY_START_HOUR + hour_index:02d}:00",
                    hour_index=hour_index,
                    covers=covers,
                    max_covers=max_covers,
                    percent=capacity_percent(covers, max_covers),
                    level=capacity_level(covers, max_covers, self.config),
                )
            )

        logger.debug(
            f"Aggregated {len(blocks)} blocks into {len(rows)} hourly rows "
            f"against {max_covers} seats"
        )
        return rows

    @staticmethod
    def peak_row(rows: Iterable[CapacityRow]) -> Optional[CapacityRow]:
        """Busiest hour by utilization; earliest hour wins a tie"""
        peak = None
        for row in rows:
            if peak is None or row.percent > peak.percent:
                peak = row
        return peak
