"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .config import AppConfig
from .infrastructure.media_storage import MediaStorage, S3MediaStorage
from .infrastructure.queue import SqlJobQueue
from .ingest.ingest_api import router as uploads_router
from .ingest.ingest_service import UploadPipeline
from .ingest.multipart import MultipartIngestor
from .ingest.validation import UploadValidator
from .media.blob_uploader import BlobUploader
from .media.job_enqueuer import JobEnqueuer
from .media.metadata_recorder import MetadataRecorder
from .media.temp_media_store import TempMediaStore
from .repositories.file_record_repository import FileRecordRepository


def build_upload_pipeline(
    config: AppConfig,
    *,
    storage: MediaStorage | None = None,
    queue: SqlJobQueue | None = None,
) -> UploadPipeline:
    """Assemble the pipeline from configuration; collaborators may be overridden."""
    validator = UploadValidator(config.ingest_limits)
    temp_store = TempMediaStore(
        root=config.temp_dir,
        temp_ttl_seconds=config.temp_ttl_seconds,
    )
    file_repo = FileRecordRepository(config.session_factory)

    return UploadPipeline(
        parser=MultipartIngestor(
            validator=validator,
            temp_store=temp_store,
            limits=config.ingest_limits,
        ),
        validator=validator,
        temp_store=temp_store,
        uploader=BlobUploader(storage or S3MediaStorage(config.storage)),
        recorder=MetadataRecorder(repo=file_repo, storage=config.storage),
        enqueuer=JobEnqueuer(queue or SqlJobQueue(config.engine)),
        storage=config.storage,
        record_on_storage_failure=config.record_on_storage_failure,
    )


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    storage: MediaStorage | None = None,
    queue: SqlJobQueue | None = None,
) -> None:
    """Mount module routers and attach services."""
    pipeline = build_upload_pipeline(config, storage=storage, queue=queue)

    app.state.config = config
    app.state.upload_pipeline = pipeline

    app.include_router(uploads_router)
