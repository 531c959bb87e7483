"""Cross-cutting plumbing: logging, configuration, retries, tabular files."""
