"""Processing engines: desired-state reconciliation and inventory reporting."""
