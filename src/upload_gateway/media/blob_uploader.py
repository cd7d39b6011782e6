"""Object writes for accepted uploads."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO

from ..infrastructure.media_storage import MediaStorage
from ..ingest.ingest_models import MediaMetadataSkeleton

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StorageWriteOutcome:
    key: str
    stored: bool
    error: Exception | None = None


def content_disposition(sanitized_name: str) -> str:
    return f'attachment; filename="{sanitized_name}"'


def object_metadata(sanitized_name: str, skeleton: MediaMetadataSkeleton) -> dict[str, str]:
    return {"originalName": sanitized_name, **skeleton.storage_metadata()}


@dataclass(slots=True)
class BlobUploader:
    """Write file bytes and derived metadata to object storage.

    Write failures are reported through :class:`StorageWriteOutcome` and never
    raised; retries are left to the storage client.
    """

    storage: MediaStorage
    log: logging.Logger = field(default_factory=lambda: logger)

    async def upload(
        self,
        key: str,
        body: BinaryIO,
        content_type: str,
        sanitized_name: str,
        skeleton: MediaMetadataSkeleton,
        *,
        size_bytes: int,
    ) -> StorageWriteOutcome:
        try:
            await self.storage.put_object(
                key=key,
                body=body,
                content_type=content_type,
                content_disposition=content_disposition(sanitized_name),
                metadata=object_metadata(sanitized_name, skeleton),
            )
        except Exception as exc:
            self.log.error(
                "media.storage.write_failed",
                exc_info=exc,
                extra={
                    "key": key,
                    "file": sanitized_name,
                    "error_name": type(exc).__name__,
                    "error_message": str(exc),
                },
            )
            return StorageWriteOutcome(key=key, stored=False, error=exc)

        self.log.info(
            "media.storage.written",
            extra={"key": key, "content_type": content_type, "size_bytes": size_bytes},
        )
        return StorageWriteOutcome(key=key, stored=True)
