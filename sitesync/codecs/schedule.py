"""Schedule codec: compact sheet declarations to/from console schedule records.

Compact form, as entered in the sheet::

    type,interval,startDate(YYYYMMDD),startTime(HHMM),maxDuration,repeaterType
    daily,1,20240115,2200,120,restart

The two timezone corrections are independent: encoding shifts the local
wall clock forward by :data:`OUTBOUND_OFFSET`, decoding shifts the console
timestamp back by :data:`INBOUND_OFFSET`. They are not inverses.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from sitesync.nexpose.models import ScheduleRecord

OUTBOUND_OFFSET = timedelta(seconds=14400)
INBOUND_OFFSET = timedelta(seconds=25200)

START_FORMAT = "%Y%m%dT%H%M00000"


class ScheduleSpecError(ValueError):
    """Raised when a compact schedule or a console start timestamp is malformed."""


@dataclass(frozen=True)
class ScheduleSpec:
    type: str
    interval: int
    start_date: str  # YYYYMMDD
    start_time: str  # HHMM
    max_duration: int | None = None
    repeater_type: str | None = None

    @classmethod
    def parse(cls, text: str) -> ScheduleSpec:
        """Parse the comma-delimited sheet form; trailing fields may be omitted."""
        items = [item.strip() for item in text.split(",")]
        if len(items) < 4:
            raise ScheduleSpecError(f"schedule needs at least type,interval,date,time: {text!r}")
        items += [""] * (6 - len(items))
        sched_type, interval, start_date, start_time, max_duration, repeater = items[:6]

        if not sched_type:
            raise ScheduleSpecError(f"schedule type is empty: {text!r}")
        try:
            interval_value = int(interval)
            max_duration_value = int(max_duration) if max_duration else None
        except ValueError as exc:
            raise ScheduleSpecError(f"non-numeric interval or duration: {text!r}") from exc

        _local_datetime(start_date, start_time)
        return cls(
            type=sched_type,
            interval=interval_value,
            start_date=start_date,
            start_time=start_time,
            max_duration=max_duration_value,
            repeater_type=repeater or None,
        )

    @property
    def local_start(self) -> datetime:
        """Start as a naive local wall-clock datetime."""
        return _local_datetime(self.start_date, self.start_time)


@dataclass(frozen=True)
class ScheduleRow:
    """Decoded schedule, flattened to report cells (blank when absent)."""

    full_spec: str = ""
    type: str = ""
    interval: str = ""
    start_date: str = ""
    day_of_week: str = ""
    start_time: str = ""
    max_duration: str = ""
    repeater_type: str = ""
    enabled: str = ""


def encode(spec: ScheduleSpec) -> ScheduleRecord:
    start = spec.local_start + OUTBOUND_OFFSET
    return ScheduleRecord(
        type=spec.type,
        interval=spec.interval,
        start=start.strftime(START_FORMAT),
        enabled=True,
        max_duration=spec.max_duration,
        repeater_type=spec.repeater_type,
    )


def decode(record: ScheduleRecord) -> ScheduleRow:
    """Decode a console schedule into report cells.

    Day of week comes from the timestamp as stored; the start time is
    reported after :data:`INBOUND_OFFSET` is subtracted.
    """
    start_date = record.start[0:8]
    try:
        local = datetime.strptime(record.start[0:13], "%Y%m%dT%H%M")
    except ValueError as exc:
        raise ScheduleSpecError(f"bad schedule start timestamp: {record.start!r}") from exc
    adjusted = local - INBOUND_OFFSET
    start_time = adjusted.strftime("%H%M")

    max_duration = _cell(record.max_duration)
    repeater = _cell(record.repeater_type)
    full_spec = ",".join(
        [record.type, str(record.interval), start_date, start_time, max_duration, repeater]
    )
    return ScheduleRow(
        full_spec=full_spec,
        type=record.type,
        interval=str(record.interval),
        start_date=start_date,
        day_of_week=local.strftime("%A"),
        start_time=start_time,
        max_duration=max_duration,
        repeater_type=repeater,
        enabled="true" if record.enabled else "false",
    )


def pick_last(records: Sequence[ScheduleRecord]) -> ScheduleRecord | None:
    """Policy for sites carrying several schedules: the last one listed wins."""
    return records[-1] if records else None


def decode_schedules(records: Sequence[ScheduleRecord]) -> ScheduleRow:
    record = pick_last(records)
    if record is None:
        return ScheduleRow()
    return decode(record)


def _local_datetime(start_date: str, start_time: str) -> datetime:
    if len(start_date) != 8 or len(start_time) != 4:
        raise ScheduleSpecError(f"bad start date/time {start_date!r} {start_time!r}")
    try:
        return datetime.strptime(start_date + start_time, "%Y%m%d%H%M")
    except ValueError as exc:
        raise ScheduleSpecError(f"bad start date/time {start_date!r} {start_time!r}") from exc


def _cell(value: object) -> str:
    return "" if value is None else str(value)
