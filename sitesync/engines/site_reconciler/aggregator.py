"""Fold declaration rows into one DesiredSite per site name."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from sitesync.engines.site_reconciler.models import DesiredSite

log = structlog.get_logger("sitesync.engine.reconciler")

COL_SITE_NAME = "Site Name"
COL_TEMPLATE_ID = "Scan Template ID"
COL_ENGINE_NAME = "Scan Engine Name"
COL_SCHEDULE = "Scan Schedule"
COL_DESCRIPTION = "Description"
COL_INCLUDE = "IP Include"
COL_EXCLUDE = "IP Exclude"

# column -> DesiredSite attribute, last non-empty value wins
_SCALAR_COLUMNS = {
    COL_TEMPLATE_ID: "template_id",
    COL_ENGINE_NAME: "engine_name",
    COL_SCHEDULE: "schedule_spec",
    COL_DESCRIPTION: "description",
}


def fold(rows: Iterable[Mapping[str, str | None]]) -> dict[str, DesiredSite]:
    """Merge rows sharing a site name.

    The result keeps first-appearance order of site names; include/exclude
    lists keep row order.
    """
    sites: dict[str, DesiredSite] = {}
    for line_no, row in enumerate(rows, start=2):
        name = _cell(row, COL_SITE_NAME)
        if not name:
            log.warning("aggregate.row_without_site_name", line=line_no)
            continue

        site = sites.get(name)
        if site is None:
            log.debug("aggregate.site_found", site=name)
            site = DesiredSite(name=name)
            sites[name] = site

        for column, attr in _SCALAR_COLUMNS.items():
            value = _cell(row, column)
            if value:
                setattr(site, attr, value)

        include = _cell(row, COL_INCLUDE)
        if include:
            site.included_ranges.append(include)
        exclude = _cell(row, COL_EXCLUDE)
        if exclude:
            site.excluded_ranges.append(exclude)

    return sites


def _cell(row: Mapping[str, str | None], column: str) -> str:
    return (row.get(column) or "").strip()
