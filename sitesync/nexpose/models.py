"""Remote entities exchanged with the console JSON API.

Site configurations keep unknown fields (``extra="allow"``) so that a
load → mutate → save cycle does not drop settings this tool never touches.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

_COMPACT_TIME_FORMAT = "%Y%m%dT%H%M%S"


class SiteSummary(BaseModel):
    id: int
    name: str


class EngineSummary(BaseModel):
    """A scan engine or an engine pool; both are assignable to a site."""

    id: int
    name: str


class ScanTarget(BaseModel):
    """One included/excluded entry: an address range (``from``/``to``) or a host name."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    host: str | None = None


class ScanTargets(BaseModel):
    model_config = ConfigDict(extra="allow")

    addresses: list[ScanTarget] = Field(default_factory=list)


class ScheduleRecord(BaseModel):
    """Recurring scan schedule as stored by the console.

    ``start`` uses the console's absolute timestamp form ``YYYYMMDDTHHMM00000``.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    interval: int
    start: str
    enabled: bool = True
    max_duration: int | None = None
    repeater_type: str | None = None


class SiteConfig(BaseModel):
    """Full site configuration. ``id is None`` means not yet created."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    name: str
    description: str | None = None
    scan_template_id: str | None = None
    scan_template_name: str | None = None
    engine_id: int | None = None
    included_scan_targets: ScanTargets = Field(default_factory=ScanTargets)
    excluded_scan_targets: ScanTargets = Field(default_factory=ScanTargets)
    schedules: list[ScheduleRecord] = Field(default_factory=list)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScanSummary(BaseModel):
    """Timing and live-host count of a site's most recent scan."""

    start_time: datetime | None = None
    end_time: datetime | None = None
    live_nodes: int = 0

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_compact(cls, value: object) -> object:
        # Compact console form: 20240131T221500123 (trailing digits are millis)
        if isinstance(value, str) and len(value) >= 15 and value[8:9] == "T" and value[:8].isdigit():
            return datetime.strptime(value[:15], _COMPACT_TIME_FORMAT)
        return value

    @property
    def duration_seconds(self) -> float | None:
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()
