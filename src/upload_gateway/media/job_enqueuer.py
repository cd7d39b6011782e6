"""Dispatch of ``process-media`` jobs for persisted records."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..exceptions import QueueUnavailableError
from ..infrastructure.queue import QueuedJob, SqlJobQueue
from ..ingest.ingest_models import ProcessingJobPayload

logger = logging.getLogger(__name__)

PROCESS_MEDIA_JOB = "process-media"


@dataclass(slots=True)
class JobEnqueuer:
    """Submit a processing job; the payload must reference a committed record."""

    queue: SqlJobQueue
    log: logging.Logger = field(default_factory=lambda: logger)

    async def enqueue(
        self,
        payload: ProcessingJobPayload,
        job_name: str = PROCESS_MEDIA_JOB,
    ) -> QueuedJob | None:
        try:
            job = await asyncio.to_thread(self.queue.add, job_name, payload.as_dict())
        except QueueUnavailableError as exc:
            self.log.error(
                "media.job.enqueue_failed",
                exc_info=exc,
                extra={"job_name": job_name, "file_id": payload.file_id, "key": payload.key},
            )
            return None

        self.log.info(
            "media.job.enqueued",
            extra={"job_id": job.id, "job_name": job_name, "file_id": payload.file_id},
        )
        return job
