"""InventoryReporter: snapshot each console site into a ReportRow."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from ipaddress import IPv4Address

import structlog

from sitesync.codecs import ranges
from sitesync.codecs.ranges import CanonicalRange
from sitesync.codecs.schedule import decode_schedules
from sitesync.core.retry import DEFAULT_DELAYS, RetryExhaustedError, with_retry
from sitesync.engines.inventory_reporter.models import NO_SCAN_DATA, ReportRow
from sitesync.nexpose.client import NexposeClient
from sitesync.nexpose.errors import ApiRejectedError, UserInterruptedError
from sitesync.nexpose.models import EngineSummary, ScanTarget, SiteSummary

log = structlog.get_logger("sitesync.engine.reporter")


def format_duration(seconds: float) -> str:
    """``93784`` → ``"1 days, 2 hours, 3 minutes, 4 seconds"``."""
    mm, ss = divmod(int(seconds), 60)
    hh, mm = divmod(mm, 60)
    dd, hh = divmod(hh, 24)
    return f"{dd} days, {hh} hours, {mm} minutes, {ss} seconds"


def tally_targets(targets: Iterable[ScanTarget]) -> tuple[list[str], int]:
    """Render targets as text and count the addresses they cover.

    Entries without a usable address (host names) count as one asset.
    """
    texts: list[str] = []
    total = 0
    for target in targets:
        rng = _canonical(target)
        if rng is None:
            label = target.host or target.from_
            if not label:
                continue
            texts.append(label)
            total += 1
        else:
            texts.append(ranges.encode(rng))
            total += ranges.count(rng)
    return texts, total


class InventoryReporter:
    """Build report rows for console sites, strictly one site at a time."""

    def __init__(
        self,
        client: NexposeClient,
        engines: Sequence[EngineSummary],
        *,
        delays: Sequence[int] = DEFAULT_DELAYS,
    ) -> None:
        self._client = client
        self._engines = list(engines)
        self._delays = tuple(delays)

    def report_all(self, sites: Iterable[SiteSummary]) -> list[ReportRow]:
        return list(self.iter_rows(sites))

    def iter_rows(self, sites: Iterable[SiteSummary]) -> Iterator[ReportRow]:
        """Yield a row per site as soon as it is built.

        Sites that cannot be loaded are logged and skipped.
        """
        for summary in sites:
            try:
                row = self.report(summary)
            except UserInterruptedError:
                raise
            except RetryExhaustedError as exc:
                log.error(
                    "report.site_skipped",
                    site=summary.name,
                    site_id=summary.id,
                    error=str(exc.cause),
                )
            except Exception as exc:
                log.error(
                    "report.site_failed",
                    site=summary.name,
                    site_id=summary.id,
                    error=str(exc),
                )
            else:
                yield row

    def report(self, summary: SiteSummary) -> ReportRow:
        site = with_retry(
            self._delays,
            lambda: self._client.load_site(summary.id),
            label=f"load site {summary.name}",
        )
        log.info("report.site_loaded", site=summary.name, site_id=summary.id)

        include_text, include_count = tally_targets(site.included_scan_targets.addresses)
        exclude_text, exclude_count = tally_targets(site.excluded_scan_targets.addresses)
        live_assets, duration = self.last_scan_stats(summary)

        return ReportRow(
            name=summary.name,
            site_id=summary.id,
            # not clamped: excludes larger than includes give a negative total
            defined_assets=include_count - exclude_count,
            live_assets=live_assets,
            ip_include=include_text,
            ip_exclude=exclude_text,
            description=site.description or "",
            template_name=site.scan_template_name or "",
            template_id=site.scan_template_id or "",
            engine_name=self.engine_name(site.engine_id),
            schedule=decode_schedules(site.schedules),
            last_scan_duration=duration,
        )

    def engine_name(self, engine_id: int | None) -> str:
        for engine in self._engines:
            if engine.id == engine_id:
                return engine.name
        return ""

    def last_scan_stats(self, summary: SiteSummary) -> tuple[int, str]:
        """(live asset count, formatted duration); (0, "N/A") when unavailable."""
        try:
            scan = with_retry(
                self._delays,
                lambda: self._client.last_scan(summary.id),
                label=f"last scan {summary.name}",
            )
        except RetryExhaustedError:
            log.error("report.last_scan_unavailable", site=summary.name, site_id=summary.id)
            return 0, NO_SCAN_DATA
        except ApiRejectedError as exc:
            log.warning("report.last_scan_rejected", site=summary.name, error=str(exc))
            return 0, NO_SCAN_DATA

        if scan is None:
            return 0, NO_SCAN_DATA
        seconds = scan.duration_seconds
        if seconds is None:
            log.warning("report.last_scan_incomplete", site=summary.name, site_id=summary.id)
            return 0, NO_SCAN_DATA
        return scan.live_nodes, format_duration(seconds)


def _canonical(target: ScanTarget) -> CanonicalRange | None:
    if not target.from_:
        return None
    try:
        first = IPv4Address(target.from_.strip())
        last = IPv4Address(target.to.strip()) if target.to else None
    except ValueError:
        return None
    return CanonicalRange(first, last)
