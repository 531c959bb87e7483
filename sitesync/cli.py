"""CLI entry point: sitesync.

Subcommands:
    sitesync sync sitelist_detail.csv     # create/update sites from the sheet
    sitesync sync sheet.csv --dry-run     # show the aggregated sites only
    sitesync report -o reports/           # write Sitedata-<stamp>.csv

Exit codes:
    0 = completed, or stopped by the operator (Ctrl+C)
    1 = could not log in or fetch the site/engine listing
    2 = configuration or input file error
"""

from __future__ import annotations

import sys
from collections import Counter
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import click
import structlog

from sitesync.core.config import ConfigError, Settings, load_settings
from sitesync.core.logging import LOG_FORMATS, setup_logging
from sitesync.core.retry import DEFAULT_DELAYS, RetryExhaustedError, with_retry
from sitesync.core.tabular import read_rows, report_filename, write_report
from sitesync.engines.inventory_reporter import InventoryReporter
from sitesync.engines.site_reconciler import DesiredSite, SiteReconciler, fold
from sitesync.nexpose.client import NexposeClient
from sitesync.nexpose.errors import NexposeError, UserInterruptedError
from sitesync.nexpose.models import EngineSummary, SiteSummary

log = structlog.get_logger("sitesync.cli")

EXIT_OK = 0
EXIT_CONSOLE_UNAVAILABLE = 1
EXIT_BAD_INPUT = 2


class ListingUnavailable(Exception):
    """The site or engine listing could not be fetched; nothing can proceed."""


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default=None,
    help="Log renderer (default: SITESYNC_LOG_FORMAT or console)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    default="settings.yml",
    show_default=True,
    help="YAML settings file with console host/user/pass",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_format: str | None, config_path: str) -> None:
    """sitesync: keep console scan sites in line with a spreadsheet."""
    setup_logging(verbose=verbose, log_format=log_format)
    ctx.obj = {"config_path": config_path}


@main.command("sync")
@click.argument("sheet", type=click.Path(exists=True, dir_okay=False))
@click.option("--encoding", default="utf-8-sig", show_default=True, help="Sheet file encoding")
@click.option("--dry-run", is_flag=True, help="Aggregate and print sites without contacting the console")
@click.pass_context
def sync(ctx: click.Context, sheet: str, encoding: str, dry_run: bool) -> None:
    """Create or update sites declared in SHEET."""
    try:
        rows = read_rows(sheet, encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        click.echo(f"Error: cannot read {sheet}: {e}", err=True)
        sys.exit(EXIT_BAD_INPUT)

    desired = fold(rows)
    log.info("sync.sheet_loaded", sheet=sheet, rows=len(rows), sites=len(desired))

    if dry_run:
        for site in desired.values():
            _echo_desired(site)
        return

    settings = _settings_or_exit(ctx)
    sys.exit(_run_session(settings, lambda client: _sync(client, list(desired.values()))))


@main.command("report")
@click.option(
    "-o",
    "--output-dir",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False),
    help="Directory for the Sitedata CSV",
)
@click.pass_context
def report(ctx: click.Context, output_dir: str) -> None:
    """Write one row per console site to a timestamped CSV."""
    settings = _settings_or_exit(ctx)
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / report_filename(datetime.now())
    sys.exit(_run_session(settings, lambda client: _report(client, path)))


# ── orchestration ─────────────────────────────────────────────────────────


def _run_session(settings: Settings, work: Callable[[NexposeClient], int]) -> int:
    """Run *work* inside one console session; logout happens on every path."""
    try:
        with NexposeClient(settings) as client:
            return work(client)
    except (UserInterruptedError, KeyboardInterrupt):
        log.warning("run.interrupted", detail="exit requested by user")
        return EXIT_OK
    except ListingUnavailable as exc:
        log.error("run.listing_unavailable", error=str(exc))
        return EXIT_CONSOLE_UNAVAILABLE
    except NexposeError as exc:
        log.error("run.failed", error=str(exc))
        return EXIT_CONSOLE_UNAVAILABLE


def _fetch_listings(client: NexposeClient) -> tuple[list[SiteSummary], list[EngineSummary]]:
    try:
        sites = with_retry(DEFAULT_DELAYS, client.list_sites, label="list sites")
    except RetryExhaustedError as exc:
        raise ListingUnavailable(f"can't proceed without site listing: {exc.cause}") from exc
    try:
        engines = with_retry(
            DEFAULT_DELAYS,
            lambda: client.list_engines() + client.list_engine_pools(),
            label="list engines",
        )
    except RetryExhaustedError as exc:
        raise ListingUnavailable(f"can't proceed without engine listing: {exc.cause}") from exc
    log.info("run.listings_loaded", sites=len(sites), engines=len(engines))
    return sites, engines


def _sync(client: NexposeClient, desired: list[DesiredSite]) -> int:
    sites, engines = _fetch_listings(client)
    outcomes = SiteReconciler(client, sites, engines).reconcile_all(desired)
    counts = Counter(o.status for o in outcomes)
    log.info(
        "sync.completed",
        created=counts["created"],
        updated=counts["updated"],
        failed=counts["failed"],
    )
    for outcome in outcomes:
        if outcome.status == "failed":
            click.echo(f"  FAILED {outcome.name}: {outcome.error}", err=True)
    return EXIT_OK


def _report(client: NexposeClient, path: Path) -> int:
    sites, engines = _fetch_listings(client)
    reporter = InventoryReporter(client, engines)
    written = write_report(path, (row.as_cells() for row in reporter.iter_rows(sites)))
    log.info("report.completed", path=str(path), rows=written, sites=len(sites))
    click.echo(f"Report written to {path} ({written} sites)")
    return EXIT_OK


# ── helpers ───────────────────────────────────────────────────────────────


def _settings_or_exit(ctx: click.Context) -> Settings:
    config_path = ctx.obj["config_path"]
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_BAD_INPUT)


def _echo_desired(site: DesiredSite) -> None:
    click.echo(site.name)
    click.echo(f"  template:    {site.template_id or '-'}")
    click.echo(f"  engine:      {site.engine_name or '-'}")
    click.echo(f"  schedule:    {site.schedule_spec or '-'}")
    click.echo(f"  description: {site.description or '-'}")
    click.echo(f"  include:     {', '.join(site.included_ranges) or '-'}")
    click.echo(f"  exclude:     {', '.join(site.excluded_ranges) or '-'}")


if __name__ == "__main__":
    main()
