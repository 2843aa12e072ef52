"""Aggregation, rate derivation, time-series synthesis and persistence."""
