"""
Unit tests for health checks.
"""

from unittest.mock import MagicMock

from photogallery.config import get_config
from photogallery.health import (
    check_environment_health,
    check_metadata_health,
    check_storage_health,
    get_application_info,
    perform_health_check,
)


def _store(healthy: bool) -> MagicMock:
    store = MagicMock()
    store.check_health.return_value = healthy
    return store


class TestComponentChecks:
    def test_metadata(self):
        assert check_metadata_health(_store(True))["status"] == "healthy"
        assert check_metadata_health(_store(False))["status"] == "unhealthy"

    def test_storage(self):
        result = check_storage_health(_store(True))

        assert result["status"] == "healthy"
        assert result["backend"] == "local"
        assert check_storage_health(_store(False))["status"] == "unhealthy"

    def test_environment_healthy_in_test(self):
        assert check_environment_health()["status"] == "healthy"

    def test_environment_missing_gcs_settings(self, monkeypatch):
        monkeypatch.setenv("BLOB_BACKEND", "gcs")
        monkeypatch.delenv("GCS_PHOTOS_BUCKET", raising=False)
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "test-project")
        get_config().clear_cache()

        result = check_environment_health()

        assert result["status"] == "unhealthy"
        assert result["missing_vars"] == ["GCS_PHOTOS_BUCKET"]

    def test_environment_production_requires_password(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("ADMIN_PASSWORD")
        get_config().clear_cache()

        assert check_environment_health()["missing_vars"] == ["ADMIN_PASSWORD"]

    def test_application_info(self):
        info = get_application_info()

        assert info["name"] == "photogallery"
        assert info["version"] == "0.1.0"
        assert info["environment"] == "test"
        assert info["uptime"] >= 0


class TestPerformHealthCheck:
    def test_all_healthy(self, metadata_store, blob_store):
        report = perform_health_check(metadata_store, blob_store)

        assert report["status"] == "healthy"
        assert set(report["checks"]) == {"metadata", "storage", "environment"}
        assert "unhealthy_services" not in report

    def test_unhealthy_component(self, blob_store):
        report = perform_health_check(_store(False), blob_store)

        assert report["status"] == "unhealthy"
        assert report["unhealthy_services"] == ["metadata"]
