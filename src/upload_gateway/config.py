"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db

MIB = 1024 * 1024

DEFAULT_ALLOWED_CONTENT_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-matroska",
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
    "audio/webm",
    "audio/aac",
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


class AppSettings(BaseSettings):
    """Environment-driven settings for the upload gateway."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    aws_s3_bucket_name: str | None = None
    aws_region: str | None = None
    aws_s3_endpoint_url: str | None = Field(
        default=None,
        description="Optional S3-compatible endpoint (MinIO, localstack).",
    )
    database_url: str = "sqlite:///uploads.db"
    upload_temp_dir: Path = Path("./var/uploads/tmp")
    upload_max_part_bytes: int = Field(
        default=1024 * MIB,
        ge=1,
        description="Hard cap on a single multipart part; exceeding it fails the request.",
    )
    upload_temp_ttl_seconds: int = Field(default=60 * 60, ge=1)
    upload_record_on_storage_failure: bool = Field(
        default=False,
        description="Persist and return records even when the object write failed.",
    )
    log_level: str = "INFO"


@dataclass(slots=True)
class StorageConfig:
    """Object storage coordinates, validated per request."""

    bucket: str | None
    region: str | None
    endpoint_url: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.bucket) and bool(self.region)

    def public_url(self, key: str) -> str:
        """Derive the public URL for ``key``; the object is never probed."""
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


@dataclass(slots=True)
class IngestLimits:
    allowed_content_types: tuple[str, ...] = DEFAULT_ALLOWED_CONTENT_TYPES
    image_limit_bytes: int = 25 * MIB
    video_limit_bytes: int = 500 * MIB
    audio_limit_bytes: int = 100 * MIB
    default_limit_bytes: int = 50 * MIB
    max_part_bytes: int = 1024 * MIB
    file_field: str = "file"


@dataclass(slots=True)
class AppConfig:
    storage: StorageConfig
    ingest_limits: IngestLimits
    temp_dir: Path
    temp_ttl_seconds: int
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    record_on_storage_failure: bool = False
    log_level: str = "INFO"


def load_config(settings: AppSettings | None = None) -> AppConfig:
    """Build runtime configuration from environment (SQLite by default)."""
    settings = settings or AppSettings()

    temp_dir = Path(settings.upload_temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    engine = create_engine(settings.database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    return AppConfig(
        storage=StorageConfig(
            bucket=settings.aws_s3_bucket_name,
            region=settings.aws_region,
            endpoint_url=settings.aws_s3_endpoint_url,
        ),
        ingest_limits=IngestLimits(max_part_bytes=settings.upload_max_part_bytes),
        temp_dir=temp_dir,
        temp_ttl_seconds=settings.upload_temp_ttl_seconds,
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
        record_on_storage_failure=settings.upload_record_on_storage_failure,
        log_level=settings.log_level,
    )
