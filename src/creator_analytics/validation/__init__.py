"""Metric invariant checks and the record validator."""
