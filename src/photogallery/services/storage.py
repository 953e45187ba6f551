"""Blob storage for photo originals and thumbnails.

Blobs are addressed by a logical path such as ``originals/<fileName>``. Two
back-ends are provided: Google Cloud Storage for deployments and a local
filesystem store for development.
"""

import hashlib
import json
import mimetypes
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from google.cloud import storage  # type: ignore[attr-defined]
from google.cloud.exceptions import GoogleCloudError, NotFound

from ..config import get_blob_backend, get_env, get_local_blob_root
from ..error_handling import StorageReadError, StorageWriteError
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class StoredBlob:
    """Blob contents with the headers needed to serve it."""

    data: bytes
    content_type: str
    etag: str


class BlobStore:
    """Binary storage keyed by logical path.

    Each operation is atomic for a single object. ``delete`` of a missing
    object is a no-op.
    """

    def put(self, path: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def get(self, path: str) -> StoredBlob | None:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def check_health(self) -> bool:
        """Whether the backing storage is reachable."""
        return True


class GCSBlobStore(BlobStore):
    """Blob store backed by a Google Cloud Storage bucket."""

    def __init__(self, bucket_name: str | None = None, project_id: str | None = None) -> None:
        """
        Initialize the GCS blob store.

        Args:
            bucket_name: Photos bucket name (defaults to GCS_PHOTOS_BUCKET environment variable)
            project_id: GCP project ID (defaults to GOOGLE_CLOUD_PROJECT environment variable)

        Raises:
            StorageReadError: If configuration is missing or the client cannot be created
        """
        self.bucket_name = bucket_name or os.getenv("GCS_PHOTOS_BUCKET")
        self.project_id = project_id or os.getenv("GOOGLE_CLOUD_PROJECT")

        if not self.bucket_name:
            raise StorageReadError("GCS_PHOTOS_BUCKET environment variable is required")
        if not self.project_id:
            raise StorageReadError("GOOGLE_CLOUD_PROJECT environment variable is required")

        try:
            self.client = storage.Client(project=self.project_id)
            self.bucket = self.client.bucket(self.bucket_name)
            logger.info("gcs_blob_store_initialized", bucket=self.bucket_name, project_id=self.project_id)
        except Exception as e:
            raise StorageReadError(f"Failed to initialize GCS client: {e}", original_exception=e) from e

    def put(self, path: str, data: bytes, content_type: str) -> None:
        """
        Upload a blob.

        Raises:
            StorageWriteError: If upload fails
        """
        try:
            blob = self.bucket.blob(path)
            blob.upload_from_string(data, content_type=content_type)
            logger.info("blob_uploaded", path=path, size=len(data), content_type=content_type)
        except GoogleCloudError as e:
            raise StorageWriteError(
                f"Failed to upload blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e
        except Exception as e:
            raise StorageWriteError(
                f"Unexpected error uploading blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

    def get(self, path: str) -> StoredBlob | None:
        """
        Download a blob.

        Returns:
            StoredBlob, or None if no object exists at the path

        Raises:
            StorageReadError: If download fails
        """
        try:
            blob = self.bucket.get_blob(path)
            if blob is None:
                return None

            data: bytes = blob.download_as_bytes()
            logger.debug("blob_downloaded", path=path, size=len(data))
            return StoredBlob(
                data=data,
                content_type=blob.content_type or DEFAULT_CONTENT_TYPE,
                etag=blob.etag or hashlib.md5(data, usedforsecurity=False).hexdigest(),
            )

        except NotFound:
            # deleted between metadata lookup and download
            return None
        except GoogleCloudError as e:
            raise StorageReadError(
                f"Failed to download blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e
        except Exception as e:
            raise StorageReadError(
                f"Unexpected error downloading blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

    def delete(self, path: str) -> None:
        """
        Delete a blob; a missing blob is not an error.

        Raises:
            StorageWriteError: If deletion fails
        """
        try:
            self.bucket.blob(path).delete()
            logger.info("blob_deleted", path=path)
        except NotFound:
            logger.debug("blob_already_absent", path=path)
        except GoogleCloudError as e:
            raise StorageWriteError(
                f"Failed to delete blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e
        except Exception as e:
            raise StorageWriteError(
                f"Unexpected error deleting blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

    def check_health(self) -> bool:
        """Check if the configured bucket exists and is accessible."""
        try:
            self.bucket.reload()
            return True
        except NotFound:
            logger.error("bucket_not_found", bucket=self.bucket_name)
            return False
        except Exception as e:
            logger.error("bucket_check_failed", bucket=self.bucket_name, error=str(e))
            return False


class LocalBlobStore(BlobStore):
    """Blob store backed by a local directory.

    Object bytes live at ``<root>/<path>``; content type and etag live in a
    sidecar JSON file under ``<root>/.meta/<path>.json``.
    """

    META_DIR = ".meta"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("local_blob_store_initialized", root=str(self.root))

    def _split(self, path: str) -> list[str]:
        parts = path.split("/")
        if not parts or any(not part or part.startswith(".") for part in parts):
            raise ValueError(f"Invalid blob path: {path!r}")
        return parts

    def _data_path(self, path: str) -> Path:
        return self.root.joinpath(*self._split(path))

    def _meta_path(self, path: str) -> Path:
        parts = self._split(path)
        return self.root.joinpath(self.META_DIR, *parts[:-1], f"{parts[-1]}.json")

    @staticmethod
    def _atomic_write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def put(self, path: str, data: bytes, content_type: str) -> None:
        etag = hashlib.md5(data, usedforsecurity=False).hexdigest()
        meta = json.dumps({"contentType": content_type, "etag": etag}).encode("utf-8")
        try:
            self._atomic_write(self._meta_path(path), meta)
            self._atomic_write(self._data_path(path), data)
            logger.info("blob_uploaded", path=path, size=len(data), content_type=content_type)
        except (OSError, ValueError) as e:
            raise StorageWriteError(
                f"Failed to write blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

    def get(self, path: str) -> StoredBlob | None:
        try:
            data_path = self._data_path(path)
            data = data_path.read_bytes()
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise StorageReadError(
                f"Failed to read blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

        content_type = None
        etag = None
        try:
            meta = json.loads(self._meta_path(path).read_text(encoding="utf-8"))
            content_type = meta.get("contentType")
            etag = meta.get("etag")
        except (OSError, ValueError):
            logger.warning("blob_sidecar_unreadable", path=path)

        return StoredBlob(
            data=data,
            content_type=content_type or mimetypes.guess_type(data_path.name)[0] or DEFAULT_CONTENT_TYPE,
            etag=etag or hashlib.md5(data, usedforsecurity=False).hexdigest(),
        )

    def delete(self, path: str) -> None:
        try:
            self._data_path(path).unlink(missing_ok=True)
            self._meta_path(path).unlink(missing_ok=True)
            logger.info("blob_deleted", path=path)
        except (OSError, ValueError) as e:
            raise StorageWriteError(
                f"Failed to delete blob '{path}': {e}", details={"path": path}, original_exception=e
            ) from e

    def check_health(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.W_OK)


def create_blob_store(backend: str | None = None) -> BlobStore:
    """
    Build the blob store selected by configuration.

    Args:
        backend: "local" or "gcs" (defaults to BLOB_BACKEND)

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = backend or get_blob_backend()
    if backend == "gcs":
        return GCSBlobStore(bucket_name=get_env("GCS_PHOTOS_BUCKET"), project_id=get_env("GOOGLE_CLOUD_PROJECT"))
    if backend == "local":
        return LocalBlobStore(get_local_blob_root())
    raise ValueError(f"Unknown BLOB_BACKEND: {backend!r} (expected 'local' or 'gcs')")


_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Get the global blob store instance."""
    global _blob_store

    if _blob_store is None:
        _blob_store = create_blob_store()

    return _blob_store
