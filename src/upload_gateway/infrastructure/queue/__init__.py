"""Queue adapters for the SQL-backed job dispatcher."""

from .sql_queue import QueuedJob, SqlJobQueue

__all__ = ["QueuedJob", "SqlJobQueue"]
