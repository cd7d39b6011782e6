"""In-memory object storage used instead of S3 in tests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import BinaryIO
from dataclasses import dataclass

from upload_gateway.infrastructure.media_storage import MediaStorage
from upload_gateway.ingest.ingest_errors import StorageWriteError


@dataclass
class StoredObject:
    body: bytes
    body_type: type
    content_type: str
    content_disposition: str
    metadata: dict[str, str]


class InMemoryMediaStorage(MediaStorage):
    def __init__(self, *, fail_keys_containing: str | None = None, fail_all: bool = False) -> None:
        self.objects: dict[str, StoredObject] = {}
        self.attempts: list[str] = []
        self._fail_marker = fail_keys_containing
        self._fail_all = fail_all

    async def put_object(
        self,
        *,
        key: str,
        body: BinaryIO,
        content_type: str,
        content_disposition: str,
        metadata: Mapping[str, str],
    ) -> None:
        self.attempts.append(key)
        if self._fail_all or (self._fail_marker and self._fail_marker in key):
            raise StorageWriteError(f"simulated outage for '{key}'")
        self.objects[key] = StoredObject(
            body=body.read(),
            body_type=type(body),
            content_type=content_type,
            content_disposition=content_disposition,
            metadata=dict(metadata),
        )
