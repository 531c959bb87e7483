"""CSV helpers for the site declaration sheet and the inventory report."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

REPORT_HEADER: tuple[str, ...] = (
    "Site Name",
    "Site ID",
    "Defined Assets",
    "Asset Count",
    "IP Include",
    "IP Exclude",
    "Site Description",
    "Scan Template",
    "Scan Template ID",
    "Scan Engine",
    "Scan Schedule",
    "Scan Schedule Type",
    "Scan Schedule Interval",
    "Scan Schedule Start Date",
    "Scan Schedule Day of Week",
    "Scan Schedule Start Time",
    "Scan Schedule Max Dur",
    "Scan Schedule Repeat",
    "Scan Schedule Enabled",
    "Last Scan Duration",
)


def read_rows(path: str | Path, encoding: str = "utf-8-sig") -> list[dict[str, str]]:
    """Read a header-driven CSV file into a list of dict rows."""
    with Path(path).open("r", encoding=encoding, newline="") as f:
        return list(csv.DictReader(f))


def write_report(path: str | Path, rows: Iterable[Sequence[object]]) -> int:
    """Write report rows under :data:`REPORT_HEADER`; returns the row count."""
    count = 0
    with Path(path).open("w", encoding="utf-8", newline="") as f:
        wr = csv.writer(f)
        wr.writerow(REPORT_HEADER)
        for row in rows:
            wr.writerow(row)
            count += 1
    return count


def report_filename(now: datetime) -> str:
    return f"Sitedata-{now.strftime('%Y%m%d-%Hh%Mm')}.csv"
