"""Application layer: use cases and scheduled jobs."""
