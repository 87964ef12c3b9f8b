# backend/modules/seating/services/timeline_service.py

"""
Reservation timeline projection.

Places a day's reservations on a table/time grid whose origin is the start
of the business-day window. Blocks are recomputed from the latest
snapshots on every read; nothing here is persisted.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional
import logging

from ..config.seating_config import SeatingConfig, get_seating_config
from ..schemas.seating_schemas import (
    BlockPosition,
    ReservationSnapshot,
    TableSnapshot,
    TimelineBlock,
    TimelineRow,
)
from .turn_time_service import TurnTimeModel

logger = logging.getLogger(__name__)


class TimelineBuilder:
    """Builds timeline blocks and rows for a single business day"""

    def __init__(
        self,
        turn_time_model: Optional[TurnTimeModel] = None,
        config: Optional[SeatingConfig] = None,
    ):
        self.config = config or get_seating_config()
        self.turn_time_model = turn_time_model or TurnTimeModel(config=self.config)

    def build_blocks(
        self,
        day: date,
        reservations: Iterable[ReservationSnapshot],
        tables: Iterable[TableSnapshot],
    ) -> List[TimelineBlock]:
        """
        Project the reservations of ``day`` onto the grid.

        Cancelled and no-show reservations are skipped. Reservations that
        fall outside the display window are still emitted; clipping is a
        presentation concern. Overlapping blocks on one table are kept.
        """
        if isinstance(day, datetime):
            day = day.date()

        tables_by_number = self._active_tables_by_number(tables)
        blocks = []

        for reservation in reservations:
            if reservation.reservation_time.date() != day:
                continue
            if not reservation.status.occupies_table:
                continue

            blocks.append(self._build_block(reservation, tables_by_number))

        logger.debug(
            f"Built {len(blocks)} timeline blocks for {day.isoformat()} "
            f"across {len(tables_by_number)} active tables"
        )
        return blocks

    def _active_tables_by_number(
        self, tables: Iterable[TableSnapshot]
    ) -> Dict[int, TableSnapshot]:
        # First active table wins if the floor plan repeats a number
        by_number: Dict[int, TableSnapshot] = {}
        for table in tables:
            if table.active and table.table_number not in by_number:
                by_number[table.table_number] = table
        return by_number

    def _build_block(
        self,
        reservation: ReservationSnapshot,
        tables_by_number: Dict[int, TableSnapshot],
    ) -> TimelineBlock:
        start = reservation.reservation_time
        start_minute = (start.hour - self.config.DAY_START_HOUR) * 60 + start.minute

        table = None
        if reservation.table_number is not None:
            table = tables_by_number.get(reservation.table_number)

        if table is not None:
            table_id, table_name = table.id, table.display_name
        else:
            table_id = self.config.UNASSIGNED_TABLE_ID
            table_name = self.config.UNASSIGNED_TABLE_NAME

        return TimelineBlock(
            reservation=reservation,
            start_minute=start_minute,
            duration_minutes=self.turn_time_model.estimate_minutes(reservation.party_size),
            table_id=table_id,
            table_name=table_name,
        )

    @staticmethod
    def group_by_table(blocks: Iterable[TimelineBlock]) -> Dict[str, List[TimelineBlock]]:
        """Group blocks by table id (or the unassigned sentinel)"""
        grouped: Dict[str, List[TimelineBlock]] = defaultdict(list)
        for block in blocks:
            grouped[block.table_id].append(block)
        return dict(grouped)

    def timeline_rows(
        self,
        tables: Iterable[TableSnapshot],
        blocks: Iterable[TimelineBlock],
    ) -> List[TimelineRow]:
        """
        One row per active table ordered by section then name, followed by
        an unassigned row when any block could not be placed on a table.
        """
        grouped = self.group_by_table(blocks)

        rows = [
            TimelineRow(
                table_id=table.id,
                name=table.display_name,
                capacity=table.capacity,
                section=table.section,
                blocks=grouped.get(table.id, []),
            )
            for table in tables
            if table.active
        ]
        rows.sort(key=lambda row: (row.section, row.name))

        unassigned = grouped.get(self.config.UNASSIGNED_TABLE_ID)
        if unassigned:
            rows.append(
                TimelineRow(
                    table_id=self.config.UNASSIGNED_TABLE_ID,
                    name=self.config.UNASSIGNED_TABLE_NAME,
                    capacity=0,
                    section="",
                    blocks=unassigned,
                )
            )
        return rows

    def hour_labels(self) -> List[str]:
        """Column headers for each hour of the window, e.g. "09:00" """
        return [
            f"{hour:02d}:00"
            for hour in range(self.config.DAY_START_HOUR, self.config.DAY_END_HOUR)
        ]

    def current_time_offset(self, now: datetime) -> int:
        """Minutes from the window origin, for the "now" marker"""
        return (now.hour - self.config.DAY_START_HOUR) * 60 + now.minute

    def time_position(self, offset_minutes: int) -> float:
        """Percent of the window at which a minute offset is drawn"""
        return offset_minutes / self.config.day_window_minutes * 100

    def block_position(self, block: TimelineBlock) -> BlockPosition:
        width = block.duration_minutes / self.config.day_window_minutes * 100
        return BlockPosition(
            left_percent=self.time_position(block.start_minute),
            width_percent=max(width, self.config.MIN_BLOCK_WIDTH_PERCENT),
        )
