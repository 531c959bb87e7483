"""Shared pytest fixtures for sitesync tests: no console or network needed."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from sitesync.core import retry
from sitesync.core.config import Settings
from sitesync.nexpose.models import EngineSummary, ScanSummary, SiteConfig, SiteSummary


class FakeConsole:
    """In-memory stand-in for NexposeClient.

    ``fail(op, key, *errors)`` queues errors raised before the operation
    runs; *key* is the site id for load/last_scan, the site name for save,
    and None for listings.
    """

    def __init__(
        self,
        sites: Iterable[SiteSummary] = (),
        configs: Iterable[SiteConfig] = (),
        engines: Iterable[EngineSummary] = (),
        pools: Iterable[EngineSummary] = (),
        scans: dict[int, ScanSummary | None] | None = None,
    ) -> None:
        self.sites = list(sites)
        self.configs = {c.id: c for c in configs}
        self.engines = list(engines)
        self.pools = list(pools)
        self.scans = dict(scans or {})
        self.saved: list[SiteConfig] = []
        self.calls: list[tuple[str, object]] = []
        self.logged_in = False
        self.logged_out = False
        self._failures: dict[tuple[str, object], list[BaseException]] = {}
        self._next_id = 100

    def fail(self, op: str, key: object, *errors: BaseException) -> None:
        self._failures.setdefault((op, key), []).extend(errors)

    def _record(self, op: str, key: object = None) -> None:
        self.calls.append((op, key))
        queue = self._failures.get((op, key))
        if queue:
            raise queue.pop(0)

    # ── lifecycle ──

    def __enter__(self) -> FakeConsole:
        self.logged_in = True
        return self

    def __exit__(self, *exc: object) -> None:
        self.logged_out = True

    # ── API ──

    def list_sites(self) -> list[SiteSummary]:
        self._record("list_sites")
        return list(self.sites)

    def list_engines(self) -> list[EngineSummary]:
        self._record("list_engines")
        return list(self.engines)

    def list_engine_pools(self) -> list[EngineSummary]:
        self._record("list_engine_pools")
        return list(self.pools)

    def load_site(self, site_id: int) -> SiteConfig:
        self._record("load_site", site_id)
        return self.configs[site_id].model_copy(deep=True)

    def save_site(self, site: SiteConfig) -> int:
        self._record("save_site", site.name)
        if site.id is None:
            site.id = self._next_id
            self._next_id += 1
        self.saved.append(site.model_copy(deep=True))
        return site.id

    def last_scan(self, site_id: int) -> ScanSummary | None:
        self._record("last_scan", site_id)
        return self.scans.get(site_id)


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Record retry backoff sleeps instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(retry.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def settings():
    return Settings(host="console.example", user="nxadmin", password="s3cret")


@pytest.fixture
def make_console():
    return FakeConsole
