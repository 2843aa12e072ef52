"""Application layer: configuration, orchestration and wiring."""
