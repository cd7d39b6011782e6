"""SQL-backed job queue; workers poll ``media_jobs`` for pending rows."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import insert
from sqlalchemy.engine import Engine

from ...exceptions import handle_queue_errors
from .schema import media_jobs, metadata

PENDING = "pending"


@dataclass(slots=True)
class QueuedJob:
    id: str
    name: str
    payload: dict[str, Any]
    status: str
    created_at: datetime
    attempts: int = 0


class SqlJobQueue:
    """Append-only producer side of the media job queue."""

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._engine = engine
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        metadata.create_all(engine)

    def add(self, name: str, payload: Mapping[str, Any]) -> QueuedJob:
        job = QueuedJob(
            id=uuid.uuid4().hex,
            name=name,
            payload=dict(payload),
            status=PENDING,
            created_at=self._clock(),
        )
        with handle_queue_errors(name), self._engine.begin() as conn:
            conn.execute(
                insert(media_jobs).values(
                    id=job.id,
                    name=job.name,
                    status=job.status,
                    payload=job.payload,
                    attempts=job.attempts,
                    created_at=job.created_at,
                )
            )
        return job
