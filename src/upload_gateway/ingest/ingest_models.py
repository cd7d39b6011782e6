"""Data structures for the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Any


class MediaCategory(StrEnum):
    """Slash-prefix class of a MIME type."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    NONE = "none"


class PipelineState(StrEnum):
    """Lifecycle of a single upload request."""

    PENDING = "pending"
    PARSING = "parsing"
    PROCESSING = "processing"
    COMPLETED = "completed"
    REJECTED = "rejected"


class SkipReason(StrEnum):
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"


class FailureReason(StrEnum):
    """Failure reasons enumerated in the upload error contract."""

    INVALID_REQUEST = "invalid_request"
    NO_FILE_FIELD = "no_file_field"
    NO_VALID_FILES = "no_valid_files"
    STORAGE_NOT_CONFIGURED = "storage_not_configured"
    INTERNAL_ERROR = "internal_error"


@dataclass(slots=True)
class IncomingFilePart:
    """A file part spooled to disk by the multipart parser."""

    temp_path: Path
    mime_type: str
    size_bytes: int
    original_filename: str | None
    field_name: str = "file"


@dataclass(slots=True)
class ParseResult:
    """Outcome of driving the multipart parser over a request body."""

    files: list[IncomingFilePart] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class MediaMetadataSkeleton:
    """Placeholder media attributes, filled later by the processing stage."""

    category: MediaCategory
    fields: dict[str, Any] = field(default_factory=dict)

    def value(self, name: str) -> Any:
        return self.fields.get(name)

    def storage_metadata(self) -> dict[str, str]:
        """Non-null attributes coerced to strings for object metadata."""
        metadata: dict[str, str] = {}
        if self.category is not MediaCategory.NONE:
            metadata["contentType"] = self.category.value
        for name, value in self.fields.items():
            if value is not None:
                metadata[name] = str(value)
        return metadata


@dataclass(slots=True, frozen=True)
class StorageKey:
    key: str
    folder: str
    sanitized_name: str


@dataclass(slots=True)
class FileRecord:
    """Persisted description of a stored object."""

    id: str
    key: str
    url: str
    file_type: str
    original_name: str
    size: int
    duration: float | None = None
    width: int | None = None
    height: int | None = None
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class ProcessingJobPayload:
    """Snapshot of a record handed to the ``process-media`` job."""

    file_id: str
    key: str
    url: str
    file_type: str
    original_name: str
    size: int

    @classmethod
    def from_record(cls, record: FileRecord) -> "ProcessingJobPayload":
        return cls(
            file_id=record.id,
            key=record.key,
            url=record.url,
            file_type=record.file_type,
            original_name=record.original_name,
            size=record.size,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "fileId": self.file_id,
            "key": self.key,
            "url": self.url,
            "fileType": self.file_type,
            "originalName": self.original_name,
            "size": self.size,
        }


@dataclass(slots=True)
class Recorded:
    part: IncomingFilePart
    record: FileRecord
    job_id: str | None = None
    stored: bool = True


@dataclass(slots=True)
class Skipped:
    part: IncomingFilePart
    reason: SkipReason


@dataclass(slots=True)
class Errored:
    part: IncomingFilePart
    cause: BaseException


FileOutcome = Recorded | Skipped | Errored


@dataclass(slots=True)
class UploadContext:
    """Aggregated state of one upload request."""

    request_id: str
    state: PipelineState = PipelineState.PENDING
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def records(self) -> list[FileRecord]:
        return [outcome.record for outcome in self.outcomes if isinstance(outcome, Recorded)]

    def counts(self) -> dict[str, int]:
        return {
            "recorded": sum(isinstance(o, Recorded) for o in self.outcomes),
            "skipped": sum(isinstance(o, Skipped) for o in self.outcomes),
            "errored": sum(isinstance(o, Errored) for o in self.outcomes),
        }
