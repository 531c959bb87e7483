"""SiteReconciler: push aggregated desired sites onto the console, one site at a time."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from sitesync.codecs import ranges, schedule
from sitesync.codecs.ranges import CanonicalRange
from sitesync.codecs.schedule import ScheduleSpec
from sitesync.core.retry import DEFAULT_DELAYS, RetryExhaustedError, with_retry
from sitesync.engines.site_reconciler.models import DesiredSite, SiteOutcome
from sitesync.nexpose.client import NexposeClient
from sitesync.nexpose.errors import ApiRejectedError, UserInterruptedError
from sitesync.nexpose.models import EngineSummary, ScanTarget, SiteConfig, SiteSummary

log = structlog.get_logger("sitesync.engine.reconciler")


class SiteReconciler:
    """Apply desired state to existing or new sites.

    *site_listing* and *engines* are fetched once by the caller; *engines*
    should hold both individual engines and engine pools.
    """

    def __init__(
        self,
        client: NexposeClient,
        site_listing: Sequence[SiteSummary],
        engines: Sequence[EngineSummary],
        *,
        delays: Sequence[int] = DEFAULT_DELAYS,
    ) -> None:
        self._client = client
        self._site_listing = list(site_listing)
        self._engines = list(engines)
        self._delays = tuple(delays)

    def reconcile_all(self, desired_sites: Iterable[DesiredSite]) -> list[SiteOutcome]:
        """Reconcile every site; a failing site is logged and skipped.

        :class:`UserInterruptedError` is the only error that stops the batch.
        """
        outcomes: list[SiteOutcome] = []
        for desired in desired_sites:
            log.debug("reconcile.site_start", site=desired.name)
            try:
                outcomes.append(self.reconcile(desired))
            except UserInterruptedError:
                raise
            except RetryExhaustedError as exc:
                log.warning(
                    "reconcile.retries_exhausted",
                    site=desired.name,
                    error=str(exc.cause),
                )
                outcomes.append(SiteOutcome(desired.name, "failed", error=str(exc)))
            except Exception as exc:
                log.error("reconcile.site_failed", site=desired.name, error=str(exc))
                outcomes.append(SiteOutcome(desired.name, "failed", error=str(exc)))
        return outcomes

    def reconcile(self, desired: DesiredSite) -> SiteOutcome:
        """Load-or-create, apply, and save a single site."""
        site = self.load_or_create(desired)
        created = site.id is None
        self.apply(site, desired)

        site_id = with_retry(
            self._delays,
            lambda: self._client.save_site(site),
            label=f"save site {desired.name}",
        )
        log.info("site.saved", site=desired.name, site_id=site_id, created=created)
        return SiteOutcome(desired.name, "created" if created else "updated", site_id=site_id)

    # ── steps ─────────────────────────────────────────────────────────────

    def find_site(self, name: str) -> SiteSummary | None:
        for summary in self._site_listing:
            if summary.name == name:
                return summary
        return None

    def resolve_engine(self, engine_name: str | None) -> int | None:
        """Exact-name lookup across engines and pools; None when nothing matches."""
        if not engine_name:
            return None
        for engine in self._engines:
            if engine.name == engine_name:
                return engine.id
        return None

    def load_or_create(self, desired: DesiredSite) -> SiteConfig:
        summary = self.find_site(desired.name)
        if summary is None:
            log.debug("reconcile.site_not_found", site=desired.name)
            return SiteConfig(name=desired.name)

        try:
            return with_retry(
                self._delays,
                lambda: self._client.load_site(summary.id),
                label=f"load site {desired.name}",
            )
        except ApiRejectedError as exc:
            # Some site objects cannot be fully loaded; build a fresh one instead.
            log.warning(
                "reconcile.load_failed",
                site=desired.name,
                site_id=summary.id,
                error=str(exc),
            )
            return SiteConfig(name=desired.name)

    def apply(self, site: SiteConfig, desired: DesiredSite) -> None:
        """Apply scalars, engine, schedule and ranges. Absent fields leave the site untouched."""
        if desired.description:
            site.description = desired.description
        if desired.template_id:
            site.scan_template_id = desired.template_id

        engine_id = self.resolve_engine(desired.engine_name)
        if engine_id is not None:
            site.engine_id = engine_id
        elif desired.engine_name:
            log.warning("reconcile.engine_not_found", site=desired.name, engine=desired.engine_name)

        if desired.schedule_spec:
            spec = ScheduleSpec.parse(desired.schedule_spec)
            site.schedules.append(schedule.encode(spec))

        for raw in desired.included_ranges:
            if raw.strip():
                site.included_scan_targets.addresses.append(_to_target(ranges.decode(raw)))
        for raw in desired.excluded_ranges:
            if raw.strip():
                site.excluded_scan_targets.addresses.append(_to_target(ranges.decode(raw)))


def _to_target(rng: CanonicalRange) -> ScanTarget:
    last = None if rng.is_single else str(rng.last)
    return ScanTarget(from_=str(rng.first), to=last)
