"""sitesync: reconcile scan sites from a spreadsheet and report on live site configuration."""

__version__ = "0.1.0"
