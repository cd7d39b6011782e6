"""Persistence layer for uploaded file records."""

from __future__ import annotations

import uuid
from collections.abc import Callable

from sqlalchemy.orm import Session

from ..db.db_models import FileRecordModel
from ..exceptions import handle_sqlalchemy_errors
from ..ingest.ingest_models import FileRecord


class FileRecordRepository:
    """Store metadata about objects written to storage."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create(
        self,
        *,
        key: str,
        url: str,
        file_type: str,
        original_name: str,
        size: int,
        duration: float | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> FileRecord:
        model = FileRecordModel(
            id=uuid.uuid4().hex,
            key=key,
            url=url,
            file_type=file_type,
            original_name=original_name,
            size=size,
            duration=duration,
            width=width,
            height=height,
        )
        scope = handle_sqlalchemy_errors(entity="file", identifier=key)
        with scope, self._session_factory() as session:
            session.add(model)
            session.commit()
            return self._to_domain(model)

    @staticmethod
    def _to_domain(model: FileRecordModel) -> FileRecord:
        return FileRecord(
            id=model.id,
            key=model.key,
            url=model.url,
            file_type=model.file_type,
            original_name=model.original_name,
            size=model.size,
            duration=model.duration,
            width=model.width,
            height=model.height,
            created_at=model.created_at,
        )
