"""Tests for the schedule codec."""

from __future__ import annotations

from datetime import datetime

import pytest

from sitesync.codecs.schedule import (
    INBOUND_OFFSET,
    OUTBOUND_OFFSET,
    ScheduleRow,
    ScheduleSpec,
    ScheduleSpecError,
    decode,
    decode_schedules,
    encode,
    pick_last,
)
from sitesync.nexpose.models import ScheduleRecord


def _record(start: str, **kw) -> ScheduleRecord:
    values = {"type": "daily", "interval": 1, "start": start, "max_duration": 120, "repeater_type": "restart"}
    values.update(kw)
    return ScheduleRecord(**values)


# ── parse ──


class TestScheduleSpecParse:
    def test_full_spec(self):
        spec = ScheduleSpec.parse("daily,1,20240115,2200,120,restart")
        assert spec == ScheduleSpec("daily", 1, "20240115", "2200", 120, "restart")
        assert spec.local_start == datetime(2024, 1, 15, 22, 0)

    def test_whitespace_around_items(self):
        spec = ScheduleSpec.parse(" weekly , 2 , 20240301 , 0930 , 60 , continue ")
        assert spec.type == "weekly"
        assert spec.interval == 2
        assert spec.repeater_type == "continue"

    def test_trailing_fields_optional(self):
        spec = ScheduleSpec.parse("monthly-date,1,20240301,0900")
        assert spec.max_duration is None
        assert spec.repeater_type is None

    @pytest.mark.parametrize(
        "text",
        [
            "daily,1",
            "daily,x,20240115,2200",
            "daily,1,20240115,2200,long,restart",
            "daily,1,2024011,2200",
            "daily,1,20241345,2200",
            "daily,1,20240115,2560",
            ",1,20240115,2200",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(ScheduleSpecError):
            ScheduleSpec.parse(text)


# ── encode ──


class TestEncode:
    def test_start_shifted_forward_four_hours(self):
        record = encode(ScheduleSpec.parse("daily,1,20240115,2200,120,restart"))
        assert record.start == "20240116T020000000"

    def test_fields_carried_verbatim(self):
        record = encode(ScheduleSpec.parse("weekly,2,20240301,0930,60,continue"))
        assert record.type == "weekly"
        assert record.interval == 2
        assert record.max_duration == 60
        assert record.repeater_type == "continue"
        assert record.enabled is True

    def test_offset_constant(self):
        assert OUTBOUND_OFFSET.total_seconds() == 14400

    def test_crosses_month_boundary(self):
        record = encode(ScheduleSpec.parse("daily,1,20240131,2330"))
        assert record.start == "20240201T033000000"


# ── decode ──


class TestDecode:
    def test_start_shifted_back_seven_hours(self):
        row = decode(_record("20240116T020000000"))
        assert row.start_date == "20240116"
        assert row.start_time == "1900"

    def test_day_of_week_from_stored_instant(self):
        # Monday 03:00 stored; shifted time falls on Sunday evening
        row = decode(_record("20240115T030000000"))
        assert row.day_of_week == "Monday"
        assert row.start_time == "2000"

    def test_full_spec_string(self):
        row = decode(_record("20240116T020000000"))
        assert row.full_spec == "daily,1,20240116,1900,120,restart"
        assert row.type == "daily"
        assert row.interval == "1"
        assert row.max_duration == "120"
        assert row.repeater_type == "restart"
        assert row.enabled == "true"

    def test_missing_optional_fields_blank(self):
        row = decode(_record("20240116T020000000", max_duration=None, repeater_type=None, enabled=False))
        assert row.full_spec == "daily,1,20240116,1900,,"
        assert row.enabled == "false"

    def test_offset_constant(self):
        assert INBOUND_OFFSET.total_seconds() == 25200

    def test_encode_and_decode_offsets_do_not_cancel(self):
        record = encode(ScheduleSpec.parse("daily,1,20240115,2200,120,restart"))
        assert decode(record).start_time == "1900"

    def test_bad_start(self):
        with pytest.raises(ScheduleSpecError):
            decode(_record("garbage"))


# ── pick_last ──


class TestPickLast:
    def test_empty(self):
        assert pick_last([]) is None

    def test_last_wins(self):
        first = _record("20240101T010000000", type="weekly")
        last = _record("20240102T010000000", type="monthly-day")
        assert pick_last([first, last]) is last

    def test_decode_schedules_uses_last(self):
        rows = [_record("20240101T010000000", type="weekly"), _record("20240102T010000000")]
        assert decode_schedules(rows).type == "daily"

    def test_decode_schedules_empty_row(self):
        assert decode_schedules([]) == ScheduleRow()
        assert ScheduleRow().full_spec == ""
