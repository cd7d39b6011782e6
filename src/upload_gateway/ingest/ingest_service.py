"""Domain service coordinating the per-request upload pipeline."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

from ..config import StorageConfig
from ..media.blob_uploader import BlobUploader
from ..media.job_enqueuer import JobEnqueuer
from ..media.media_metadata import build_metadata_skeleton
from ..media.metadata_recorder import MetadataRecorder
from ..media.temp_media_store import TempMediaStore
from .ingest_errors import (
    MissingStorageConfigError,
    NoFileFieldError,
    NoValidFilesError,
    StorageWriteError,
    UploadParseError,
)
from .ingest_models import (
    Errored,
    FileOutcome,
    FileRecord,
    IncomingFilePart,
    PipelineState,
    ProcessingJobPayload,
    Recorded,
    Skipped,
    StorageKey,
    UploadContext,
)
from .keys import UNNAMED_PLACEHOLDER, derive_storage_key
from .multipart import MultipartIngestor
from .validation import UploadValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadPipeline:
    """Coordinates parse -> validate -> store -> record -> enqueue -> cleanup.

    Files of one request are handled one after another in arrival order.
    Only request-level failures raise; per-file problems are logged and the
    file is left out of the result.
    """

    parser: MultipartIngestor
    validator: UploadValidator
    temp_store: TempMediaStore
    uploader: BlobUploader
    recorder: MetadataRecorder
    enqueuer: JobEnqueuer
    storage: StorageConfig
    record_on_storage_failure: bool = False
    key_factory: Callable[[str | None, str], StorageKey] = field(
        default_factory=lambda: derive_storage_key
    )
    log: logging.Logger = field(default_factory=lambda: logger)

    async def ingest(
        self,
        content_type: str | None,
        stream: AsyncIterator[bytes],
    ) -> list[FileRecord]:
        """Run the whole request and return records in arrival order."""
        context = UploadContext(request_id=uuid.uuid4().hex)

        if not self.storage.is_complete:
            self._reject(context, "storage_not_configured")
            raise MissingStorageConfigError("Missing object storage configuration")

        context.state = PipelineState.PARSING
        parsed = await self.parser.parse(content_type, stream)
        if not parsed.ok:
            self._reject(context, "parse_error", error=parsed.error)
            raise UploadParseError(f"File parse error: {parsed.error}")
        if not parsed.files:
            self._reject(context, "no_file_field")
            raise NoFileFieldError("No files were uploaded")

        context.state = PipelineState.PROCESSING
        pending = list(parsed.files)
        try:
            while pending:
                part = pending.pop(0)
                context.outcomes.append(await self.process_file(part, context))
        finally:
            # Non-empty only when the loop was interrupted.
            for part in pending:
                self.temp_store.remove(part.temp_path)

        records = context.records
        if not records:
            self._reject(context, "no_valid_files")
            raise NoValidFilesError("No valid files were uploaded")

        context.state = PipelineState.COMPLETED
        self.log.info(
            "upload.request.completed",
            extra={"request_id": context.request_id, **context.counts()},
        )
        return records

    async def process_file(
        self,
        part: IncomingFilePart,
        context: UploadContext,
    ) -> FileOutcome:
        """Run the per-file chain; the temp file is removed on every path."""
        try:
            reason = self.validator.check(
                part.mime_type, part.size_bytes, filename=part.original_filename
            )
            if reason is not None:
                return Skipped(part=part, reason=reason)

            storage_key = self.key_factory(part.original_filename, part.mime_type)
            self.log.info(
                "upload.file.processing",
                extra={
                    "request_id": context.request_id,
                    "key": storage_key.key,
                    "mimetype": part.mime_type,
                },
            )
            skeleton = build_metadata_skeleton(part.mime_type)

            body = await asyncio.to_thread(part.temp_path.open, "rb")
            try:
                written = await self.uploader.upload(
                    storage_key.key,
                    body,
                    part.mime_type,
                    storage_key.sanitized_name,
                    skeleton,
                    size_bytes=part.size_bytes,
                )
            finally:
                body.close()
            if not written.stored and not self.record_on_storage_failure:
                self.log.warning(
                    "upload.file.aborted_unstored",
                    extra={"request_id": context.request_id, "key": storage_key.key},
                )
                return Errored(
                    part=part,
                    cause=written.error or StorageWriteError(storage_key.key),
                )

            record = await self.recorder.record(
                key=storage_key.key,
                mime_type=part.mime_type,
                original_name=part.original_filename or UNNAMED_PLACEHOLDER,
                size=part.size_bytes,
                skeleton=skeleton,
            )
            job = await self.enqueuer.enqueue(ProcessingJobPayload.from_record(record))
            self.log.info(
                "upload.file.recorded",
                extra={
                    "request_id": context.request_id,
                    "file_id": record.id,
                    "key": record.key,
                    "job_id": job.id if job else None,
                    "stored": written.stored,
                },
            )
            return Recorded(
                part=part,
                record=record,
                job_id=job.id if job else None,
                stored=written.stored,
            )
        except Exception as exc:
            self.log.exception(
                "upload.file.failed",
                extra={
                    "request_id": context.request_id,
                    "file": part.original_filename,
                    "mimetype": part.mime_type,
                },
            )
            return Errored(part=part, cause=exc)
        finally:
            self.temp_store.remove(part.temp_path)

    def _reject(self, context: UploadContext, reason: str, **fields: object) -> None:
        context.state = PipelineState.REJECTED
        self.log.warning(
            "upload.request.rejected",
            extra={
                "request_id": context.request_id,
                "reason": reason,
                **context.counts(),
                **fields,
            },
        )
