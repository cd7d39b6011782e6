"""Adapters for external systems: object storage and the job queue."""
