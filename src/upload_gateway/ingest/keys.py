"""Storage key derivation for accepted uploads."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable

from .ingest_models import StorageKey

UNNAMED_PLACEHOLDER = "unnamed"
KEY_PREFIX = "uploads"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str | None) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", filename or UNNAMED_PLACEHOLDER)


def storage_folder(mime_type: str) -> str:
    if mime_type.startswith("image/"):
        return "images"
    if mime_type.startswith("video/"):
        return "videos"
    if mime_type.startswith("audio/"):
        return "audio"
    return "documents"


def derive_storage_key(
    filename: str | None,
    mime_type: str,
    *,
    token_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> StorageKey:
    """Build ``uploads/{folder}/{token}-{name}``; the token keeps keys unique."""
    sanitized = sanitize_filename(filename)
    folder = storage_folder(mime_type)
    return StorageKey(
        key=f"{KEY_PREFIX}/{folder}/{token_factory()}-{sanitized}",
        folder=folder,
        sanitized_name=sanitized,
    )
