"""Data models for the inventory reporter engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from sitesync.codecs.schedule import ScheduleRow

NO_SCAN_DATA = "N/A"


@dataclass
class ReportRow:
    """One site's configuration snapshot, in report column order."""

    name: str
    site_id: int
    defined_assets: int
    live_assets: int
    ip_include: list[str] = field(default_factory=list)
    ip_exclude: list[str] = field(default_factory=list)
    description: str = ""
    template_name: str = ""
    template_id: str = ""
    engine_name: str = ""
    schedule: ScheduleRow = field(default_factory=ScheduleRow)
    last_scan_duration: str = NO_SCAN_DATA

    def as_cells(self) -> list[object]:
        s = self.schedule
        return [
            self.name,
            self.site_id,
            self.defined_assets,
            self.live_assets,
            "\n".join(self.ip_include),
            "\n".join(self.ip_exclude),
            self.description,
            self.template_name,
            self.template_id,
            self.engine_name,
            s.full_spec,
            s.type,
            s.interval,
            s.start_date,
            s.day_of_week,
            s.start_time,
            s.max_duration,
            s.repeater_type,
            s.enabled,
            self.last_scan_duration,
        ]
