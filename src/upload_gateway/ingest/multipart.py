"""Streaming multipart/form-data ingestion with a parse-time admission filter."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header

from ..config import IngestLimits
from ..media.temp_media_store import TempMediaStore
from .ingest_models import IncomingFilePart, ParseResult
from .validation import UploadValidator

logger = logging.getLogger(__name__)


class MultipartError(Exception):
    """Raised from parser callbacks to abort the current body."""


def _decode(value: bytes) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("latin-1")


@dataclass(slots=True)
class _PartState:
    headers: dict[bytes, bytes] = field(default_factory=dict)
    field_name: str = ""
    filename: str | None = None
    mime_type: str | None = None
    admitted: bool = False
    limit: int = 0
    size: int = 0
    path: Path | None = None
    sink: BinaryIO | None = None


class _BodyCollector:
    """Callback target for one request body."""

    def __init__(
        self,
        *,
        validator: UploadValidator,
        temp_store: TempMediaStore,
        limits: IngestLimits,
    ) -> None:
        self._validator = validator
        self._temp_store = temp_store
        self._limits = limits
        self._part = _PartState()
        self._header_field = b""
        self._header_value = b""
        self.files: list[IncomingFilePart] = []
        self.spooled: list[Path] = []
        self.finished = False

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self._part = _PartState()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._part.headers[self._header_field.strip().lower()] = self._header_value.strip()
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        part = self._part
        _, options = parse_options_header(part.headers.get(b"content-disposition"))
        if b"name" not in options:
            raise MultipartError('Content-Disposition header must provide a "name"')
        part.field_name = _decode(options[b"name"])
        if b"filename" not in options:
            return

        part.filename = _decode(options[b"filename"]) or None
        content_type, _ = parse_options_header(part.headers.get(b"content-type"))
        part.mime_type = content_type.decode("latin-1").strip().lower() or None

        if part.field_name != self._limits.file_field:
            logger.debug(
                "upload.part.ignored",
                extra={"field": part.field_name, "file_name": part.filename},
            )
            return
        if not self._validator.admits_part(part.mime_type, filename=part.filename):
            return

        part.admitted = True
        part.limit = self._validator.size_limit(part.mime_type or "")
        part.path = self._temp_store.allocate()
        self.spooled.append(part.path)
        part.sink = part.path.open("wb")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        part = self._part
        chunk = data[start:end]
        part.size += len(chunk)
        if part.size > self._limits.max_part_bytes:
            raise MultipartError(
                f"part exceeds maximum size of {self._limits.max_part_bytes} bytes"
            )
        if part.sink is None:
            return
        if part.size > part.limit:
            # Stop buffering past the category ceiling; the size keeps counting
            # so the re-check can report it.
            part.sink.close()
            part.sink = None
            return
        part.sink.write(chunk)

    def on_part_end(self) -> None:
        part = self._part
        if part.sink is not None:
            part.sink.close()
            part.sink = None
        if not part.admitted or part.path is None or part.mime_type is None:
            return
        self.files.append(
            IncomingFilePart(
                temp_path=part.path,
                mime_type=part.mime_type,
                size_bytes=part.size,
                original_filename=part.filename,
                field_name=part.field_name,
            )
        )

    def on_end(self) -> None:
        self.finished = True

    def close(self) -> None:
        if self._part.sink is not None:
            self._part.sink.close()
            self._part.sink = None


@dataclass(slots=True)
class MultipartIngestor:
    """Drive ``python-multipart`` over a body stream, spooling admitted files."""

    validator: UploadValidator
    temp_store: TempMediaStore
    limits: IngestLimits

    async def parse(
        self,
        content_type: str | None,
        stream: AsyncIterator[bytes],
    ) -> ParseResult:
        media_type, params = parse_options_header(content_type)
        if media_type.strip().lower() != b"multipart/form-data":
            return ParseResult(error="expected a multipart/form-data body")
        boundary = params.get(b"boundary")
        if not boundary:
            return ParseResult(error="missing boundary in multipart body")

        collector = _BodyCollector(
            validator=self.validator,
            temp_store=self.temp_store,
            limits=self.limits,
        )
        try:
            parser = MultipartParser(boundary, collector.callbacks())
            # Callbacks open and write temp files, so the parser runs off the loop.
            async for chunk in stream:
                if chunk:
                    await asyncio.to_thread(parser.write, chunk)
            await asyncio.to_thread(parser.finalize)
            if not collector.finished:
                raise MultipartError("unexpected end of multipart body")
        except (MultipartError, FormParserError) as exc:
            self._discard(collector)
            logger.warning("upload.parse.failed", extra={"error": str(exc)})
            return ParseResult(error=str(exc))
        except BaseException:
            self._discard(collector)
            raise

        logger.info(
            "upload.parse.completed",
            extra={"files": len(collector.files), "spooled": len(collector.spooled)},
        )
        return ParseResult(files=collector.files)

    def _discard(self, collector: _BodyCollector) -> None:
        collector.close()
        for path in collector.spooled:
            self.temp_store.remove(path)
