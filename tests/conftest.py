from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from upload_gateway.config import MIB, AppConfig, IngestLimits, StorageConfig
from upload_gateway.db.db_init import init_db

TEST_BUCKET = "test-bucket"
TEST_REGION = "eu-west-1"


@pytest.fixture
def engine(tmp_path: Path) -> Engine:
    # File-backed so worker threads (asyncio.to_thread) see the same database.
    engine = create_engine(f"sqlite:///{tmp_path / 'uploads.sqlite'}", future=True)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(bucket=TEST_BUCKET, region=TEST_REGION)


@pytest.fixture
def ingest_limits() -> IngestLimits:
    return IngestLimits()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def app_config(
    tmp_path: Path,
    engine: Engine,
    session_factory: sessionmaker[Session],
    storage_config: StorageConfig,
    temp_dir: Path,
) -> AppConfig:
    return AppConfig(
        storage=storage_config,
        ingest_limits=IngestLimits(image_limit_bytes=1 * MIB, max_part_bytes=4 * MIB),
        temp_dir=temp_dir,
        temp_ttl_seconds=60,
        database_url=str(engine.url),
        engine=engine,
        session_factory=session_factory,
    )
