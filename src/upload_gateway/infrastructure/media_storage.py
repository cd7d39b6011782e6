"""Abstractions over media storage backends."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StorageConfig
from ..ingest.ingest_errors import StorageWriteError


class MediaStorage:
    """Low-level persistence API for uploaded objects."""

    async def put_object(
        self,
        *,
        key: str,
        body: BinaryIO,
        content_type: str,
        content_disposition: str,
        metadata: Mapping[str, str],
    ) -> None:
        """Stream ``body`` (a readable file object) under ``key``.

        Raise :class:`StorageWriteError` on failure.
        """

        raise NotImplementedError


class S3MediaStorage(MediaStorage):
    """boto3-backed storage writing into a single bucket."""

    def __init__(self, config: StorageConfig, *, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            kwargs: dict[str, Any] = {"region_name": self._config.region}
            if self._config.endpoint_url:
                kwargs["endpoint_url"] = self._config.endpoint_url
            self._client = boto3.client("s3", **kwargs)
        return self._client

    async def put_object(
        self,
        *,
        key: str,
        body: BinaryIO,
        content_type: str,
        content_disposition: str,
        metadata: Mapping[str, str],
    ) -> None:
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self._config.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                ContentDisposition=content_disposition,
                Metadata=dict(metadata),
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteError(f"failed to write object '{key}': {exc}") from exc
