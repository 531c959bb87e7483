"""Session-scoped console client over the JSON API.

One authenticated session per process run. Use as a context manager so the
session is logged out on every exit path::

    with NexposeClient(settings) as client:
        sites = client.list_sites()
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from sitesync.core.config import Settings
from sitesync.nexpose.errors import (
    ApiRejectedError,
    AuthenticationError,
    MalformedResponseError,
    TransientNetworkError,
    UserInterruptedError,
)
from sitesync.nexpose.models import EngineSummary, ScanSummary, SiteConfig, SiteSummary

log = structlog.get_logger("sitesync.nexpose")

SESSION_HEADER = "nexposeCCSessionID"

_SITE_LIST = TypeAdapter(list[SiteSummary])
_ENGINE_LIST = TypeAdapter(list[EngineSummary])


class NexposeClient:
    """Thin synchronous wrapper around the console API."""

    def __init__(self, settings: Settings, *, transport: httpx.BaseTransport | None = None) -> None:
        self._settings = settings
        self._session_id: str | None = None
        self._client = httpx.Client(
            base_url=settings.base_url,
            headers={"Accept": "application/json"},
            timeout=settings.timeout,
            verify=settings.verify_tls,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    def __enter__(self) -> NexposeClient:
        try:
            self.login()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, *exc: object) -> None:
        try:
            self.logout()
        finally:
            self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def logged_in(self) -> bool:
        return self._session_id is not None

    def login(self) -> None:
        data = self._request(
            "POST",
            "/data/user/login",
            data={
                "nexposeccusername": self._settings.user,
                "nexposeccpassword": self._settings.password,
            },
        )
        session_id = data.get("sessionID") if isinstance(data, dict) else None
        if not session_id:
            raise AuthenticationError("login response did not contain a session id")
        self._session_id = session_id
        self._client.headers[SESSION_HEADER] = session_id
        log.info("nexpose.login", host=self._settings.host, user=self._settings.user)

    def logout(self) -> None:
        """End the session. Never raises; it runs on every exit path."""
        if self._session_id is None:
            return
        try:
            self._request("POST", "/data/user/logout")
            log.info("nexpose.logout", host=self._settings.host)
        except Exception as exc:
            log.warning("nexpose.logout_failed", host=self._settings.host, error=str(exc))
        finally:
            self._session_id = None
            self._client.headers.pop(SESSION_HEADER, None)

    # ── public ─────────────────────────────────────────────────────────────

    def list_sites(self) -> list[SiteSummary]:
        return self._parse(_SITE_LIST, self._request("GET", "/api/2.1/sites"))

    def list_engines(self) -> list[EngineSummary]:
        return self._parse(_ENGINE_LIST, self._request("GET", "/api/2.1/engines"))

    def list_engine_pools(self) -> list[EngineSummary]:
        return self._parse(_ENGINE_LIST, self._request("GET", "/api/2.1/engine_pools"))

    def load_site(self, site_id: int) -> SiteConfig:
        data = self._request("GET", f"/api/2.1/site_configurations/{site_id}")
        return self._parse(TypeAdapter(SiteConfig), data)

    def save_site(self, site: SiteConfig) -> int:
        """Create (``id is None``) or update a site; returns its id.

        The id of a newly created site is written back onto *site*.
        """
        payload = site.to_payload()
        if site.id is None:
            data = self._request("POST", "/api/2.1/site_configurations/", json=payload)
            site.id = self._parse_id(data)
        else:
            self._request("PUT", f"/api/2.1/site_configurations/{site.id}", json=payload)
        return site.id

    def last_scan(self, site_id: int) -> ScanSummary | None:
        """Most recent scan of a site, or None when the site was never scanned."""
        try:
            data = self._request("GET", f"/api/2.1/sites/{site_id}/last_scan")
        except ApiRejectedError as exc:
            if exc.status_code == 404:
                return None
            raise
        if not data:
            return None
        return self._parse(TypeAdapter(ScanSummary), data)

    # ── internal ───────────────────────────────────────────────────────────

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and translate failures into error kinds."""
        try:
            resp = self._client.request(method, url, **kwargs)
        except KeyboardInterrupt:
            raise UserInterruptedError(f"interrupted during {method} {url}") from None
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise TransientNetworkError(f"{method} {url}: {exc!r}") from exc

        if resp.status_code in (401, 403):
            raise AuthenticationError(
                f"{method} {url} rejected: HTTP {resp.status_code}", resp.status_code
            )
        if resp.is_error:
            raise ApiRejectedError(
                f"{method} {url} failed: HTTP {resp.status_code} {resp.text[:200]}",
                resp.status_code,
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise MalformedResponseError(f"{method} {url}: response is not JSON") from None

    @staticmethod
    def _parse(adapter: TypeAdapter, data: Any) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"unexpected response shape: {exc}") from exc

    @staticmethod
    def _parse_id(data: Any) -> int:
        if isinstance(data, bool):
            raise MalformedResponseError(f"create returned no site id: {data!r}")
        if isinstance(data, int):
            return data
        if isinstance(data, dict) and isinstance(data.get("id"), int):
            return data["id"]
        raise MalformedResponseError(f"create returned no site id: {data!r}")
