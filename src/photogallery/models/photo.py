"""
Photo record model for photogallery.

A ``PhotoRecord`` is the metadata document stored for every uploaded image.
It is persisted as JSON under its id, with camelCase keys, and points at the
original blob through ``file_name``.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import Any

ORIGINALS_PREFIX = "originals"
THUMBNAILS_PREFIX = "thumbnails"


def utc_timestamp(now: datetime | None = None) -> str:
    """Format a UTC timestamp as ISO-8601 with millisecond precision and a Z suffix."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a stored timestamp.

    Returns:
        Timezone-aware datetime, or None when the value is missing or unparseable.
        Naive timestamps are taken to be UTC.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def file_extension(original_name: str) -> str:
    """
    Extension of an uploaded file name, taken verbatim.

    The text after the last dot of the base name; empty when the name has no
    dot or ends with one.
    """
    base_name = PurePosixPath(original_name.replace("\\", "/")).name
    _, dot, extension = base_name.rpartition(".")
    return extension if dot else ""


def original_blob_path(file_name: str) -> str:
    return f"{ORIGINALS_PREFIX}/{file_name}"


def thumbnail_blob_path(file_name: str) -> str:
    return f"{THUMBNAILS_PREFIX}/{file_name}"


class InvalidPhotoDocument(ValueError):
    """A stored document cannot be interpreted as a photo record."""


@dataclass
class PhotoRecord:
    """
    Metadata for one uploaded photo.

    Timestamps are kept as the strings that were persisted so an update
    rewrites every untouched field byte for byte.
    """

    id: str
    file_name: str
    original_name: str
    size: int
    mime_type: str
    title: str
    description: str
    uploaded_at: str
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def create_new(
        cls,
        original_name: str,
        size: int,
        mime_type: str,
        title: str | None = None,
        description: str | None = None,
        uploaded_at: datetime | None = None,
    ) -> "PhotoRecord":
        """
        Create a new PhotoRecord with a generated id and the current timestamp.

        Args:
            original_name: File name as uploaded
            size: Size of the uploaded file in bytes
            mime_type: MIME type reported by the uploader
            title: Display title (defaults to the original file name)
            description: Free-text description (defaults to empty)
            uploaded_at: Upload time (defaults to now)

        Returns:
            New PhotoRecord instance
        """
        photo_id = str(uuid.uuid4())
        extension = file_extension(original_name)
        file_name = f"{photo_id}.{extension}" if extension else photo_id

        return cls(
            id=photo_id,
            file_name=file_name,
            original_name=original_name,
            size=size,
            mime_type=mime_type,
            title=title or original_name,
            description=description or "",
            uploaded_at=utc_timestamp(uploaded_at),
        )

    @property
    def original_path(self) -> str:
        return original_blob_path(self.file_name)

    @property
    def thumbnail_path(self) -> str:
        return thumbnail_blob_path(self.file_name)

    @property
    def uploaded_at_datetime(self) -> datetime | None:
        return parse_timestamp(self.uploaded_at)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert PhotoRecord to the JSON document stored and returned by the API.

        ``updatedAt`` is omitted until the first update.
        """
        document: dict[str, Any] = dict(self.extra)
        document.update(
            {
                "id": self.id,
                "fileName": self.file_name,
                "originalName": self.original_name,
                "size": self.size,
                "mimeType": self.mime_type,
                "title": self.title,
                "description": self.description,
                "uploadedAt": self.uploaded_at,
            }
        )
        if self.updated_at is not None:
            document["updatedAt"] = self.updated_at
        return document

    @classmethod
    def from_dict(cls, data: Any, photo_id: str | None = None) -> "PhotoRecord":
        """
        Create PhotoRecord from a stored document.

        Args:
            data: Parsed JSON document
            photo_id: Store key; takes precedence over any id in the document

        Raises:
            InvalidPhotoDocument: If the document is not an object or has no fileName
        """
        if not isinstance(data, dict):
            raise InvalidPhotoDocument("Photo document is not a JSON object")

        file_name = data.get("fileName")
        if not isinstance(file_name, str) or not file_name:
            raise InvalidPhotoDocument("Photo document has no fileName")

        record_id = photo_id or data.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise InvalidPhotoDocument("Photo document has no id")

        known = {
            "id",
            "fileName",
            "originalName",
            "size",
            "mimeType",
            "type",
            "title",
            "description",
            "uploadedAt",
            "updatedAt",
        }
        size = data.get("size", 0)
        updated_at = data.get("updatedAt")

        return cls(
            id=record_id,
            file_name=file_name,
            original_name=str(data.get("originalName", "")),
            size=size if isinstance(size, int) else 0,
            # documents written by the original gallery store the MIME type as "type"
            mime_type=str(data.get("mimeType") or data.get("type") or ""),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            uploaded_at=str(data.get("uploadedAt", "")),
            updated_at=str(updated_at) if updated_at is not None else None,
            extra={key: value for key, value in data.items() if key not in known},
        )
