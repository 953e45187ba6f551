"""
Unit tests for blob storage.
"""

import os
from unittest.mock import MagicMock, patch

import pytest
from google.cloud.exceptions import GoogleCloudError, NotFound

from photogallery.config import get_config
from photogallery.error_handling import StorageReadError, StorageWriteError
from photogallery.services.storage import (
    GCSBlobStore,
    LocalBlobStore,
    create_blob_store,
    get_blob_store,
)

GCS_ENV = {"GCS_PHOTOS_BUCKET": "test-photos-bucket", "GOOGLE_CLOUD_PROJECT": "test-project"}


class TestGCSBlobStore:
    """Test cases for GCSBlobStore class."""

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_init_success(self, mock_client_class):
        """Test successful initialization."""
        mock_client = MagicMock()
        mock_bucket = MagicMock()
        mock_client.bucket.return_value = mock_bucket
        mock_client_class.return_value = mock_client

        store = GCSBlobStore()

        assert store.bucket_name == "test-photos-bucket"
        assert store.project_id == "test-project"
        assert store.bucket == mock_bucket
        mock_client_class.assert_called_once_with(project="test-project")

    def test_init_missing_bucket_name(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(StorageReadError, match="GCS_PHOTOS_BUCKET environment variable is required"):
                GCSBlobStore()

    def test_init_missing_project_id(self):
        with patch.dict("os.environ", {"GCS_PHOTOS_BUCKET": "test-photos-bucket"}, clear=True):
            with pytest.raises(StorageReadError, match="GOOGLE_CLOUD_PROJECT environment variable is required"):
                GCSBlobStore()

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_init_client_error(self, mock_client_class):
        mock_client_class.side_effect = Exception("Client initialization failed")

        with pytest.raises(StorageReadError, match="Failed to initialize GCS client"):
            GCSBlobStore()

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_put(self, mock_client_class):
        mock_blob = MagicMock()
        mock_client_class.return_value.bucket.return_value.blob.return_value = mock_blob

        store = GCSBlobStore()
        store.put("originals/a.jpg", b"data", "image/jpeg")

        store.bucket.blob.assert_called_once_with("originals/a.jpg")
        mock_blob.upload_from_string.assert_called_once_with(b"data", content_type="image/jpeg")

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_put_failure(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.upload_from_string.side_effect = GoogleCloudError("Upload failed")
        mock_client_class.return_value.bucket.return_value.blob.return_value = mock_blob

        store = GCSBlobStore()

        with pytest.raises(StorageWriteError, match="Failed to upload blob"):
            store.put("originals/a.jpg", b"data", "image/jpeg")

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_get(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.download_as_bytes.return_value = b"data"
        mock_blob.content_type = "image/png"
        mock_blob.etag = "CJDk"
        mock_client_class.return_value.bucket.return_value.get_blob.return_value = mock_blob

        stored = GCSBlobStore().get("originals/a.png")

        assert stored is not None
        assert stored.data == b"data"
        assert stored.content_type == "image/png"
        assert stored.etag == "CJDk"

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_get_defaults_content_type_and_etag(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.download_as_bytes.return_value = b"data"
        mock_blob.content_type = None
        mock_blob.etag = None
        mock_client_class.return_value.bucket.return_value.get_blob.return_value = mock_blob

        stored = GCSBlobStore().get("originals/a")

        assert stored.content_type == "application/octet-stream"
        assert stored.etag == "8d777f385d3dfec8815d20f7496026dc"

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_get_missing(self, mock_client_class):
        mock_client_class.return_value.bucket.return_value.get_blob.return_value = None

        assert GCSBlobStore().get("originals/missing.jpg") is None

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_get_deleted_during_download(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.download_as_bytes.side_effect = NotFound("gone")
        mock_client_class.return_value.bucket.return_value.get_blob.return_value = mock_blob

        assert GCSBlobStore().get("originals/a.jpg") is None

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_get_failure(self, mock_client_class):
        mock_client_class.return_value.bucket.return_value.get_blob.side_effect = GoogleCloudError("Read failed")

        with pytest.raises(StorageReadError, match="Failed to download blob"):
            GCSBlobStore().get("originals/a.jpg")

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_delete_missing_is_noop(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.delete.side_effect = NotFound("gone")
        mock_client_class.return_value.bucket.return_value.blob.return_value = mock_blob

        GCSBlobStore().delete("originals/a.jpg")

        mock_blob.delete.assert_called_once()

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_delete_failure(self, mock_client_class):
        mock_blob = MagicMock()
        mock_blob.delete.side_effect = GoogleCloudError("Delete failed")
        mock_client_class.return_value.bucket.return_value.blob.return_value = mock_blob

        with pytest.raises(StorageWriteError, match="Failed to delete blob"):
            GCSBlobStore().delete("originals/a.jpg")

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_check_health(self, mock_client_class):
        mock_bucket = mock_client_class.return_value.bucket.return_value
        store = GCSBlobStore()

        assert store.check_health() is True

        mock_bucket.reload.side_effect = NotFound("no bucket")
        assert store.check_health() is False


class TestLocalBlobStore:
    """Test cases for LocalBlobStore class."""

    def test_put_and_get(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.put("originals/a.jpg", b"data", "image/jpeg")

        stored = store.get("originals/a.jpg")

        assert stored.data == b"data"
        assert stored.content_type == "image/jpeg"
        assert stored.etag == "8d777f385d3dfec8815d20f7496026dc"
        assert (tmp_path / "originals" / "a.jpg").read_bytes() == b"data"

    def test_put_overwrites(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.put("originals/a.jpg", b"one", "image/jpeg")
        store.put("originals/a.jpg", b"two", "image/png")

        stored = store.get("originals/a.jpg")

        assert stored.data == b"two"
        assert stored.content_type == "image/png"

    def test_get_missing(self, tmp_path):
        assert LocalBlobStore(tmp_path).get("originals/missing.jpg") is None

    def test_get_without_sidecar_guesses_content_type(self, tmp_path):
        (tmp_path / "originals").mkdir()
        (tmp_path / "originals" / "b.png").write_bytes(b"png")

        stored = LocalBlobStore(tmp_path).get("originals/b.png")

        assert stored.content_type == "image/png"
        assert stored.etag

    def test_delete(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.put("originals/a.jpg", b"data", "image/jpeg")

        store.delete("originals/a.jpg")

        assert store.get("originals/a.jpg") is None
        assert not (tmp_path / ".meta" / "originals" / "a.jpg.json").exists()

    def test_delete_missing_is_noop(self, tmp_path):
        LocalBlobStore(tmp_path).delete("thumbnails/never-written.jpg")

    @pytest.mark.parametrize("path", ["", "originals/../secret", "originals//a.jpg", ".meta/x.json"])
    def test_invalid_paths(self, tmp_path, path):
        store = LocalBlobStore(tmp_path)

        with pytest.raises(StorageWriteError):
            store.put(path, b"data", "image/jpeg")
        with pytest.raises(StorageReadError):
            store.get(path)

    def test_check_health(self, tmp_path):
        assert LocalBlobStore(tmp_path).check_health() is True


class TestBlobStoreFactory:
    def test_create_local(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOCAL_BLOB_ROOT", str(tmp_path / "store"))
        get_config().clear_cache()

        store = create_blob_store("local")

        assert isinstance(store, LocalBlobStore)
        assert os.path.isdir(tmp_path / "store")

    @patch.dict("os.environ", GCS_ENV)
    @patch("photogallery.services.storage.storage.Client")
    def test_create_gcs(self, mock_client_class):
        get_config().clear_cache()
        assert isinstance(create_blob_store("gcs"), GCSBlobStore)

    def test_create_unknown(self):
        with pytest.raises(ValueError, match="Unknown BLOB_BACKEND"):
            create_blob_store("s3")

    def test_get_blob_store_singleton(self):
        first = get_blob_store()
        assert isinstance(first, LocalBlobStore)
        assert get_blob_store() is first
