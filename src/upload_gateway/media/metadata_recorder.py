"""Persist a record for every stored object."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..config import StorageConfig
from ..ingest.ingest_models import FileRecord, MediaMetadataSkeleton
from ..repositories.file_record_repository import FileRecordRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MetadataRecorder:
    """Derive the public URL and persist a :class:`FileRecord`.

    Repository errors propagate: a failed insert aborts that file only.
    """

    repo: FileRecordRepository
    storage: StorageConfig
    log: logging.Logger = field(default_factory=lambda: logger)

    async def record(
        self,
        *,
        key: str,
        mime_type: str,
        original_name: str,
        size: int,
        skeleton: MediaMetadataSkeleton,
    ) -> FileRecord:
        url = self.storage.public_url(key)
        record = await asyncio.to_thread(
            self.repo.create,
            key=key,
            url=url,
            file_type=mime_type,
            original_name=original_name,
            size=size,
            duration=skeleton.value("duration"),
            width=skeleton.value("width"),
            height=skeleton.value("height"),
        )
        self.log.info(
            "media.record.created",
            extra={"file_id": record.id, "key": key, "file_type": mime_type},
        )
        return record
