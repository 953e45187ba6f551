"""
Pytest configuration and fixtures for photogallery tests.
"""

import hashlib
import io
from collections.abc import Generator
from pathlib import Path

import pytest
from PIL import Image

from photogallery.config import get_config
from photogallery.error_handling import StorageWriteError
from photogallery.models.photo import PhotoRecord
from photogallery.services import (
    auth,
    gallery,
    image_delivery,
    image_processor,
    metadata,
    photos,
    settings_store,
    storage,
)
from photogallery.services.gallery import GalleryService
from photogallery.services.metadata import DuckDBMetadataStore
from photogallery.services.photos import PhotoRepository
from photogallery.services.settings_store import SettingsStore
from photogallery.services.storage import BlobStore, StoredBlob

TEST_ADMIN_PASSWORD = "test-password"


class InMemoryBlobStore(BlobStore):
    """Blob store fake keeping objects in a dict.

    Paths listed in ``fail_puts`` / ``fail_deletes`` raise StorageWriteError.
    """

    def __init__(self) -> None:
        self.objects: dict[str, StoredBlob] = {}
        self.fail_puts: set[str] = set()
        self.fail_deletes: set[str] = set()
        self.deleted: list[str] = []

    def put(self, path: str, data: bytes, content_type: str) -> None:
        if path in self.fail_puts or "*" in self.fail_puts:
            raise StorageWriteError(f"Simulated write failure for {path}")
        self.objects[path] = StoredBlob(
            data=data, content_type=content_type, etag=hashlib.md5(data, usedforsecurity=False).hexdigest()
        )

    def get(self, path: str) -> StoredBlob | None:
        return self.objects.get(path)

    def delete(self, path: str) -> None:
        if path in self.fail_deletes:
            raise StorageWriteError(f"Simulated delete failure for {path}")
        self.deleted.append(path)
        self.objects.pop(path, None)


def make_image(width: int = 1200, height: int = 900, image_format: str = "JPEG", color: str = "red") -> bytes:
    """Encode a solid-color test image."""
    mode = "RGBA" if image_format == "PNG" else "RGB"
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


def make_record(photo_id: str, uploaded_at: str, **overrides) -> PhotoRecord:
    """Photo record with fixed values apart from the id and upload time."""
    values = {
        "id": photo_id,
        "file_name": f"{photo_id}.jpg",
        "original_name": f"{photo_id}.jpg",
        "size": 100,
        "mime_type": "image/jpeg",
        "title": photo_id,
        "description": "",
        "uploaded_at": uploaded_at,
    }
    values.update(overrides)
    return PhotoRecord(**values)


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Set up test environment variables and reset the service singletons."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setenv("METADATA_DB_PATH", ":memory:")
    monkeypatch.setenv("BLOB_BACKEND", "local")
    monkeypatch.setenv("LOCAL_BLOB_ROOT", str(tmp_path / "blobs"))
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "false")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    monkeypatch.setattr(storage, "_blob_store", None)
    monkeypatch.setattr(metadata, "_metadata_store", None)
    monkeypatch.setattr(photos, "_photo_repository", None)
    monkeypatch.setattr(settings_store, "_settings_store", None)
    monkeypatch.setattr(gallery, "_gallery_service", None)
    monkeypatch.setattr(image_processor, "_image_processor", None)
    monkeypatch.setattr(image_delivery, "_image_delivery", None)
    monkeypatch.setattr(auth, "_session_validator", None)

    get_config().clear_cache()
    yield
    get_config().clear_cache()


@pytest.fixture
def metadata_store() -> Generator[DuckDBMetadataStore, None, None]:
    """DuckDB metadata store in memory."""
    store = DuckDBMetadataStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def repository(metadata_store: DuckDBMetadataStore, blob_store: InMemoryBlobStore) -> PhotoRepository:
    return PhotoRepository(metadata_store, blob_store)


@pytest.fixture
def settings(metadata_store: DuckDBMetadataStore) -> SettingsStore:
    return SettingsStore(metadata_store)


@pytest.fixture
def gallery_service(repository: PhotoRepository, settings: SettingsStore) -> GalleryService:
    return GalleryService(repository, settings)


@pytest.fixture
def sample_image_data() -> bytes:
    """A 1200x900 JPEG."""
    return make_image()


@pytest.fixture
def small_png_data() -> bytes:
    """A 200x100 PNG with an alpha channel."""
    return make_image(200, 100, "PNG")
