"""Placeholder media metadata per MIME category."""

from __future__ import annotations

from ..ingest.ingest_models import MediaCategory, MediaMetadataSkeleton

CATEGORY_FIELDS: dict[MediaCategory, tuple[str, ...]] = {
    MediaCategory.VIDEO: ("duration", "width", "height"),
    MediaCategory.AUDIO: ("duration",),
    MediaCategory.IMAGE: ("width", "height"),
    MediaCategory.NONE: (),
}


def media_category(mime_type: str) -> MediaCategory:
    prefix = mime_type.split("/", 1)[0]
    try:
        return MediaCategory(prefix)
    except ValueError:
        return MediaCategory.NONE


def build_metadata_skeleton(mime_type: str) -> MediaMetadataSkeleton:
    category = media_category(mime_type)
    return MediaMetadataSkeleton(
        category=category,
        fields={name: None for name in CATEGORY_FIELDS[category]},
    )
