import pytest

from tests.helpers.db import stored_file, stored_files
from upload_gateway.exceptions import DuplicateKeyError
from upload_gateway.repositories.file_record_repository import FileRecordRepository


def create_record(repo: FileRecordRepository, key: str = "uploads/images/t-a.png"):
    return repo.create(
        key=key,
        url=f"https://bucket.s3.region.amazonaws.com/{key}",
        file_type="image/png",
        original_name="a.png",
        size=10,
    )


def test_create_persists_and_returns_record(session_factory):
    repo = FileRecordRepository(session_factory)

    record = create_record(repo)

    assert len(record.id) == 32
    assert record.created_at is not None
    row = stored_file(session_factory, record.id)
    assert row is not None
    assert row.key == record.key
    assert row.file_type == "image/png"
    assert row.original_name == "a.png"
    assert row.duration is None and row.width is None and row.height is None


def test_duplicate_key_is_rejected(session_factory):
    repo = FileRecordRepository(session_factory)
    create_record(repo)

    with pytest.raises(DuplicateKeyError, match="uploads/images/t-a.png"):
        create_record(repo)

    assert len(stored_files(session_factory)) == 1
