"""Pydantic schemas for the upload API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FileRecordSchema(BaseModel):
    """Stored file as returned to the client (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    key: str
    url: str
    file_type: str
    original_name: str
    size: int = Field(..., ge=0)
    duration: float | None = None
    width: int | None = None
    height: int | None = None
    created_at: datetime | None = None


class UploadErrorSchema(BaseModel):
    status: str = "error"
    failure_reason: str
    details: Any | None = None
