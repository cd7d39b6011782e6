"""HTTP routes for multipart uploads."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from .ingest_errors import (
    MissingStorageConfigError,
    NoFileFieldError,
    NoValidFilesError,
    UploadError,
    UploadParseError,
)
from .ingest_models import FailureReason
from .ingest_schemas import FileRecordSchema, UploadErrorSchema
from .ingest_service import UploadPipeline

router = APIRouter(prefix="/api/uploads", tags=["uploads"])
logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[UploadError], tuple[int, FailureReason]] = {
    UploadParseError: (status.HTTP_400_BAD_REQUEST, FailureReason.INVALID_REQUEST),
    NoFileFieldError: (status.HTTP_400_BAD_REQUEST, FailureReason.NO_FILE_FIELD),
    NoValidFilesError: (
        422,
        FailureReason.NO_VALID_FILES,
    ),
    MissingStorageConfigError: (
        status.HTTP_503_SERVICE_UNAVAILABLE,
        FailureReason.STORAGE_NOT_CONFIGURED,
    ),
}


def get_upload_pipeline(request: Request) -> UploadPipeline:
    """Fetch upload pipeline from application state."""
    try:
        return request.app.state.upload_pipeline  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("UploadPipeline is not configured") from exc


def _error_response(exc: UploadError) -> HTTPException:
    status_code, reason = _ERROR_STATUS.get(
        type(exc),
        (status.HTTP_500_INTERNAL_SERVER_ERROR, FailureReason.INTERNAL_ERROR),
    )
    body = UploadErrorSchema(failure_reason=reason.value, details=str(exc))
    return HTTPException(status_code=status_code, detail=body.model_dump())


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=list[FileRecordSchema],
    response_model_by_alias=True,
)
async def upload_files(
    request: Request,
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
) -> list[FileRecordSchema]:
    """Stream the multipart body through the pipeline and return stored files."""
    try:
        records = await pipeline.ingest(
            request.headers.get("content-type"), request.stream()
        )
    except UploadError as exc:
        logger.warning(
            "upload.request.failed",
            extra={"error_name": type(exc).__name__, "error_message": str(exc)},
        )
        raise _error_response(exc) from exc
    return [FileRecordSchema.model_validate(record) for record in records]
