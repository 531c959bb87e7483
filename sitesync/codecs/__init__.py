"""Pure text codecs for address ranges and scan schedules (no I/O)."""

from sitesync.codecs.ranges import CanonicalRange, InvalidAddressError
from sitesync.codecs.schedule import ScheduleRow, ScheduleSpec, ScheduleSpecError

__all__ = [
    "CanonicalRange",
    "InvalidAddressError",
    "ScheduleRow",
    "ScheduleSpec",
    "ScheduleSpecError",
]
