"""Inventory reporter engine: one normalised report row per console site."""

from sitesync.engines.inventory_reporter.models import ReportRow
from sitesync.engines.inventory_reporter.reporter import InventoryReporter, format_duration

__all__ = ["InventoryReporter", "ReportRow", "format_duration"]
