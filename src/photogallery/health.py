"""
Health checks for the photogallery service.

Each check reports the status of one component; ``perform_health_check``
combines them into the report served at ``/health``.
"""

import platform
import time
from typing import Any

from . import __version__
from .config import get_blob_backend, get_environment, get_env, is_production
from .logging_config import get_logger
from .services.metadata import MetadataStore
from .services.storage import BlobStore

logger = get_logger(__name__)

APP_START_TIME = time.time()


def check_metadata_health(metadata_store: MetadataStore) -> dict[str, Any]:
    """Check the metadata store answers queries."""
    if metadata_store.check_health():
        return {"status": "healthy", "message": "Metadata store reachable", "timestamp": time.time()}

    logger.error("metadata_health_check_failed")
    return {"status": "unhealthy", "message": "Metadata store unreachable", "timestamp": time.time()}


def check_storage_health(blob_store: BlobStore) -> dict[str, Any]:
    """Check the blob store is reachable."""
    backend = get_blob_backend()
    if blob_store.check_health():
        return {
            "status": "healthy",
            "message": f"Blob store reachable ({backend})",
            "timestamp": time.time(),
            "backend": backend,
        }

    logger.error("storage_health_check_failed", backend=backend)
    return {
        "status": "unhealthy",
        "message": f"Blob store unreachable ({backend})",
        "timestamp": time.time(),
        "backend": backend,
    }


def check_environment_health() -> dict[str, Any]:
    """Check environment configuration."""
    required_env_vars = []

    if is_production():
        required_env_vars.append("ADMIN_PASSWORD")
    if get_blob_backend() == "gcs":
        required_env_vars.extend(["GCS_PHOTOS_BUCKET", "GOOGLE_CLOUD_PROJECT"])

    missing_vars = [var for var in required_env_vars if not get_env(var)]

    if missing_vars:
        return {
            "status": "unhealthy",
            "message": f"Missing environment variables: {', '.join(missing_vars)}",
            "timestamp": time.time(),
            "missing_vars": missing_vars,
        }

    return {
        "status": "healthy",
        "message": "Environment configuration is valid",
        "timestamp": time.time(),
        "config": {"environment": get_environment(), "blob_backend": get_blob_backend()},
    }


def get_application_info() -> dict[str, Any]:
    """Get application information."""
    return {
        "name": "photogallery",
        "version": __version__,
        "environment": get_environment(),
        "timestamp": time.time(),
        "uptime": time.time() - APP_START_TIME,
        "python_version": platform.python_version(),
        "platform": platform.system().lower(),
    }


def perform_health_check(metadata_store: MetadataStore, blob_store: BlobStore) -> dict[str, Any]:
    """Perform a health check of every component."""
    logger.info("health_check_started")

    start_time = time.time()

    checks = {
        "metadata": check_metadata_health(metadata_store),
        "storage": check_storage_health(blob_store),
        "environment": check_environment_health(),
    }

    unhealthy_services = [service for service, result in checks.items() if result["status"] != "healthy"]
    overall_status = "unhealthy" if unhealthy_services else "healthy"

    health_response = {
        "status": overall_status,
        "timestamp": time.time(),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
        "application": get_application_info(),
        "checks": checks,
    }

    if unhealthy_services:
        health_response["unhealthy_services"] = unhealthy_services

    logger.info(
        "health_check_completed",
        status=overall_status,
        duration_ms=health_response["duration_ms"],
        unhealthy_services=unhealthy_services,
    )

    return health_response
