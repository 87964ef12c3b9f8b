# backend/modules/seating/services/waitlist_analytics_service.py

"""
Waitlist outcome analytics computed from a snapshot of entries.
"""

from collections import defaultdict
from typing import Dict, Iterable, List
import calendar
import logging

from ..enums.seating_enums import WaitlistStatus
from ..schemas.seating_schemas import (
    DailyWaitStat,
    HourlyWaitStat,
    WaitlistAnalytics,
    WaitlistEntry,
)
from .waitlist_queue_service import as_utc

logger = logging.getLogger(__name__)


def _rate(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total > 0 else 0.0


def _average(values: List[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


class WaitlistAnalyticsService:
    """Summarizes how waitlist parties ended up and how long they waited"""

    @staticmethod
    def wait_minutes(entry: WaitlistEntry) -> float:
        """Minutes from joining to being seated (seated entries only)"""
        if entry.seated_at is None:
            return 0.0
        delta = as_utc(entry.seated_at) - as_utc(entry.created_at)
        return max(delta.total_seconds() / 60, 0.0)

    def summarize(self, entries: Iterable[WaitlistEntry]) -> WaitlistAnalytics:
        finished = [entry for entry in entries if entry.status.is_terminal]
        if not finished:
            return WaitlistAnalytics()

        status_counts: Dict[WaitlistStatus, int] = defaultdict(int)
        waits: List[float] = []
        hourly: Dict[int, List[float]] = defaultdict(list)
        hourly_counts: Dict[int, int] = defaultdict(int)
        daily: Dict[int, List[float]] = defaultdict(list)
        daily_counts: Dict[int, int] = defaultdict(int)

        for entry in finished:
            status_counts[entry.status] += 1
            created = entry.created_at
            hourly_counts[created.hour] += 1
            daily_counts[created.weekday()] += 1

            if entry.status == WaitlistStatus.SEATED and entry.seated_at is not None:
                wait = self.wait_minutes(entry)
                waits.append(wait)
                hourly[created.hour].append(wait)
                daily[created.weekday()].append(wait)

        total = len(finished)
        analytics = WaitlistAnalytics(
            total_entries=total,
            avg_wait_minutes=_average(waits),
            seated_rate=_rate(status_counts[WaitlistStatus.SEATED], total),
            cancelled_rate=_rate(status_counts[WaitlistStatus.CANCELLED], total),
            no_show_rate=_rate(status_counts[WaitlistStatus.NO_SHOW], total),
            by_hour=[
                HourlyWaitStat(hour=hour, avg_wait=_average(hourly[hour]), count=count)
                for hour, count in sorted(hourly_counts.items())
            ],
            by_day=[
                DailyWaitStat(
                    day=calendar.day_name[weekday],
                    avg_wait=_average(daily[weekday]),
                    count=count,
                )
                for weekday, count in sorted(daily_counts.items())
            ],
        )

        logger.debug(
            f"Waitlist analytics over {total} entries: "
            f"avg wait {analytics.avg_wait_minutes}m, no-show {analytics.no_show_rate}%"
        )
        return analytics
