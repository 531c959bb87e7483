"""Site reconciler engine: fold sheet rows into desired sites and push them to the console."""

from sitesync.engines.site_reconciler.aggregator import fold
from sitesync.engines.site_reconciler.models import DesiredSite, SiteOutcome
from sitesync.engines.site_reconciler.reconciler import SiteReconciler

__all__ = ["DesiredSite", "SiteOutcome", "SiteReconciler", "fold"]
