"""SQLAlchemy metadata describing the job queue schema."""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Index, Integer, MetaData, String, Table

metadata = MetaData()

media_jobs = Table(
    "media_jobs",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(64), nullable=False),
    Column("status", String(16), nullable=False),
    Column("payload", JSON, nullable=False),
    Column("attempts", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("ix_media_jobs_status_created_at", media_jobs.c.status, media_jobs.c.created_at)

__all__ = ["metadata", "media_jobs"]
