import logging

import pytest

from upload_gateway.config import MIB, DEFAULT_ALLOWED_CONTENT_TYPES, IngestLimits
from upload_gateway.ingest.ingest_models import SkipReason
from upload_gateway.ingest.validation import UploadValidator


def build_validator(**overrides) -> UploadValidator:
    return UploadValidator(IngestLimits(**overrides))


@pytest.mark.parametrize("mime_type", DEFAULT_ALLOWED_CONTENT_TYPES)
def test_every_allowed_type_is_accepted(mime_type):
    validator = build_validator()

    assert validator.accepts(mime_type, 1)
    assert validator.admits_part(mime_type)


@pytest.mark.parametrize(
    "mime_type",
    ["application/zip", "text/html", "application/x-msdownload", "", None],
)
def test_unlisted_types_are_rejected(mime_type):
    validator = build_validator()

    assert validator.check(mime_type, 10) is SkipReason.UNSUPPORTED_MEDIA_TYPE
    assert not validator.admits_part(mime_type)


@pytest.mark.parametrize(
    ("mime_type", "limit"),
    [
        ("video/mp4", 500 * MIB),
        ("audio/mpeg", 100 * MIB),
        ("image/png", 25 * MIB),
        ("application/pdf", 50 * MIB),
        ("text/plain", 50 * MIB),
    ],
)
def test_size_limit_by_category(mime_type, limit):
    validator = build_validator()

    assert validator.size_limit(mime_type) == limit
    assert validator.accepts(mime_type, limit)
    assert validator.check(mime_type, limit + 1) is SkipReason.PAYLOAD_TOO_LARGE


def test_oversized_file_logs_structured_warning(caplog):
    validator = build_validator()
    caplog.set_level(logging.WARNING, logger="upload_gateway.ingest.validation")

    reason = validator.check("image/jpeg", 30 * MIB, filename="holiday.jpg")

    assert reason is SkipReason.PAYLOAD_TOO_LARGE
    record = next(r for r in caplog.records if r.getMessage() == "upload.file.too_large")
    assert record.file_name == "holiday.jpg"
    assert record.mimetype == "image/jpeg"
    assert record.size == 30 * MIB
    assert record.limit == 25 * MIB


def test_custom_allow_list_replaces_defaults():
    validator = build_validator(allowed_content_types=("image/png",))

    assert validator.accepts("image/png", 1)
    assert not validator.accepts("image/jpeg", 1)
