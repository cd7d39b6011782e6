"""Upload validation policy: MIME allow-list and per-category size ceilings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..config import IngestLimits
from .ingest_models import SkipReason

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadValidator:
    """Validate file parts against configured limits.

    The same policy runs twice: as the parser's admission filter, where only
    the MIME type is known up front and the ceiling is enforced while bytes
    stream in, and as a defensive re-check on every parsed descriptor.
    """

    limits: IngestLimits
    _allowed: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        self._allowed = frozenset(self.limits.allowed_content_types)

    def is_allowed_type(self, mime_type: str | None) -> bool:
        return bool(mime_type) and mime_type in self._allowed

    def size_limit(self, mime_type: str) -> int:
        if mime_type.startswith("video/"):
            return self.limits.video_limit_bytes
        if mime_type.startswith("audio/"):
            return self.limits.audio_limit_bytes
        if mime_type.startswith("image/"):
            return self.limits.image_limit_bytes
        return self.limits.default_limit_bytes

    def admits_part(self, mime_type: str | None, *, filename: str | None = None) -> bool:
        """Parse-time admission: MIME membership only."""
        if self.is_allowed_type(mime_type):
            return True
        logger.warning(
            "upload.part.rejected",
            extra={"file_name": filename, "mimetype": mime_type, "reason": "invalid_mime_type"},
        )
        return False

    def check(
        self,
        mime_type: str | None,
        size_bytes: int,
        *,
        filename: str | None = None,
    ) -> SkipReason | None:
        """Return why a file must be skipped, or ``None`` when it is accepted."""
        if not self.is_allowed_type(mime_type):
            logger.warning(
                "upload.file.rejected",
                extra={
                    "file_name": filename,
                    "mimetype": mime_type,
                    "reason": SkipReason.UNSUPPORTED_MEDIA_TYPE.value,
                },
            )
            return SkipReason.UNSUPPORTED_MEDIA_TYPE

        limit = self.size_limit(mime_type)
        if size_bytes > limit:
            logger.warning(
                "upload.file.too_large",
                extra={
                    "file_name": filename,
                    "mimetype": mime_type,
                    "size": size_bytes,
                    "limit": limit,
                },
            )
            return SkipReason.PAYLOAD_TOO_LARGE
        return None

    def accepts(self, mime_type: str | None, size_bytes: int) -> bool:
        return self.check(mime_type, size_bytes) is None
