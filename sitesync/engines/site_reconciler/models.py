"""Data models for the site reconciler engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutcomeStatus = Literal["created", "updated", "failed"]


@dataclass
class DesiredSite:
    """Aggregate desired state for one site name, merged from one or more sheet rows.

    Scalars are None until some row supplies a value; range lists only grow.
    """

    name: str
    template_id: str | None = None
    engine_name: str | None = None
    schedule_spec: str | None = None
    description: str | None = None
    included_ranges: list[str] = field(default_factory=list)
    excluded_ranges: list[str] = field(default_factory=list)


@dataclass
class SiteOutcome:
    """What happened to one desired site during a reconcile run."""

    name: str
    status: OutcomeStatus
    site_id: int | None = None
    error: str | None = None
