"""
Photo repository: keeps metadata records and their blobs consistent.

A photo record exists iff its original blob exists. Neither store offers a
transaction spanning both, so every mutation is an ordered sequence whose
partial-failure outcome is fixed:

- create writes the blob first, then the record. A failed blob write leaves
  nothing behind. A failed record write leaves an orphan blob, which is
  logged and left for manual cleanup.
- delete removes the original blob, then the thumbnail blob (best-effort),
  then the record. An interrupted delete leaves a visible record whose image
  404s; retrying the delete completes it because deleting a missing blob is
  a no-op.

Nothing here retries; failures surface to the caller as typed errors.
"""

import json
from typing import Any

from ..error_handling import NotFoundError, StorageError, ValidationError
from ..logging_config import get_logger
from ..models.photo import InvalidPhotoDocument, PhotoRecord, utc_timestamp
from ..models.settings import is_reserved_key
from .metadata import MetadataStore, get_metadata_store
from .storage import BlobStore, get_blob_store

logger = get_logger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

EDITABLE_FIELDS = ("title", "description")


class PhotoRepository:
    """Create, read, update, delete and list photos."""

    def __init__(self, metadata_store: MetadataStore, blob_store: BlobStore) -> None:
        self.metadata_store = metadata_store
        self.blob_store = blob_store

    def create(
        self,
        file_data: bytes,
        mime_type: str,
        original_name: str,
        title: str | None = None,
        description: str | None = None,
    ) -> PhotoRecord:
        """
        Store an uploaded photo.

        Args:
            file_data: Uploaded bytes (must be non-empty)
            mime_type: MIME type reported by the uploader
            original_name: File name reported by the uploader
            title: Optional title (defaults to the original name)
            description: Optional description

        Returns:
            PhotoRecord: The persisted record

        Raises:
            ValidationError: If no file data was supplied
            StorageWriteError: If the blob or the record could not be written
        """
        if not file_data:
            raise ValidationError("No file uploaded", code="missing_file")

        record = PhotoRecord.create_new(
            original_name=original_name or "",
            size=len(file_data),
            mime_type=mime_type,
            title=title,
            description=description,
        )

        self.blob_store.put(record.original_path, file_data, mime_type)

        try:
            self.metadata_store.put(record.id, self._serialize(record))
        except StorageError:
            logger.warning(
                "orphan_blob_left",
                photo_id=record.id,
                blob_path=record.original_path,
                message="Metadata write failed after the original blob was stored",
            )
            raise

        logger.info(
            "photo_created",
            photo_id=record.id,
            file_name=record.file_name,
            size=record.size,
            mime_type=record.mime_type,
        )
        return record

    def read(self, photo_id: str) -> PhotoRecord:
        """
        Look up one photo.

        Raises:
            NotFoundError: If no photo exists under ``photo_id``
            StorageReadError: If the metadata store cannot be read
        """
        return PhotoRecord.from_dict(self._load_document(photo_id), photo_id=photo_id)

    def update(self, photo_id: str, title: Any = UNSET, description: Any = UNSET) -> PhotoRecord:
        """
        Change the editable text of a photo.

        The stored document is patched in place: only the supplied fields and
        ``updatedAt`` change, every other key is written back as it was read.
        Update never creates a record.

        Raises:
            NotFoundError: If no photo exists under ``photo_id``
            StorageWriteError: If the record could not be written
        """
        document = self._load_document(photo_id)

        if title is not UNSET:
            document["title"] = title
        if description is not UNSET:
            document["description"] = description
        document["updatedAt"] = self._now()

        self.metadata_store.put(photo_id, json.dumps(document, ensure_ascii=False))
        record = PhotoRecord.from_dict(document, photo_id=photo_id)

        logger.info(
            "photo_updated",
            photo_id=photo_id,
            fields=[name for name, value in (("title", title), ("description", description)) if value is not UNSET],
        )
        return record

    def update_from_payload(self, photo_id: str, payload: Any) -> PhotoRecord:
        """
        Apply an update request body.

        The body must be a JSON object; ``title`` and ``description``, when
        present, must be strings. Other keys are ignored.

        Raises:
            ValidationError: If the body is malformed
            NotFoundError: If no photo exists under ``photo_id``
        """
        if not isinstance(payload, dict):
            raise ValidationError("Update body must be a JSON object", code="invalid_update_body")

        changes: dict[str, Any] = {}
        for field_name in EDITABLE_FIELDS:
            if field_name not in payload:
                continue
            value = payload[field_name]
            if not isinstance(value, str):
                raise ValidationError(
                    f"Field '{field_name}' must be a string",
                    code="invalid_update_body",
                    details={"field": field_name},
                )
            changes[field_name] = value

        return self.update(photo_id, **changes)

    def delete(self, photo_id: str) -> None:
        """
        Remove a photo, its blobs first and its record last.

        Raises:
            NotFoundError: If no photo exists under ``photo_id``
            StorageWriteError: If the original blob or the record could not be removed
        """
        record = self.read(photo_id)

        self.blob_store.delete(record.original_path)

        try:
            self.blob_store.delete(record.thumbnail_path)
        except StorageError as e:
            logger.warning("thumbnail_delete_failed", photo_id=photo_id, blob_path=record.thumbnail_path, error=str(e))

        self.metadata_store.delete(photo_id)

        logger.info("photo_deleted", photo_id=photo_id, file_name=record.file_name)

    def list_all(self) -> list[PhotoRecord]:
        """
        Every photo currently stored, in no particular order.

        Documents that vanish mid-scan or cannot be parsed are skipped.

        Raises:
            StorageReadError: If the key scan fails
        """
        records: list[PhotoRecord] = []
        skipped = 0

        for key in self.metadata_store.list_keys():
            if is_reserved_key(key):
                continue

            raw = self.metadata_store.get(key)
            if raw is None:
                continue

            try:
                records.append(self._deserialize(key, raw))
            except InvalidPhotoDocument as e:
                skipped += 1
                logger.warning("corrupt_photo_document_skipped", photo_id=key, error=str(e))

        logger.debug("photos_listed", count=len(records), skipped=skipped)
        return records

    def _load_document(self, photo_id: str) -> dict[str, Any]:
        """Stored document for a photo, checked to be readable as a record."""
        if is_reserved_key(photo_id):
            raise self._not_found(photo_id)

        raw = self.metadata_store.get(photo_id)
        if raw is None:
            raise self._not_found(photo_id)

        try:
            document = json.loads(raw)
            PhotoRecord.from_dict(document, photo_id=photo_id)
        except (ValueError, InvalidPhotoDocument) as e:
            logger.warning("corrupt_photo_document", photo_id=photo_id, error=str(e))
            raise self._not_found(photo_id) from e
        return document

    @staticmethod
    def _serialize(record: PhotoRecord) -> str:
        return json.dumps(record.to_dict(), ensure_ascii=False)

    @staticmethod
    def _deserialize(photo_id: str, raw: str) -> PhotoRecord:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise InvalidPhotoDocument(f"Photo document is not valid JSON: {e}") from e
        return PhotoRecord.from_dict(data, photo_id=photo_id)

    @staticmethod
    def _now() -> str:
        return utc_timestamp()

    @staticmethod
    def _not_found(photo_id: str) -> NotFoundError:
        return NotFoundError(
            f"Photo not found: {photo_id}",
            code="photo_not_found",
            user_message="Photo not found",
            details={"photo_id": photo_id},
        )


_photo_repository: PhotoRepository | None = None


def get_photo_repository() -> PhotoRepository:
    """Get the global photo repository wired to the configured stores."""
    global _photo_repository

    if _photo_repository is None:
        _photo_repository = PhotoRepository(get_metadata_store(), get_blob_store())

    return _photo_repository
