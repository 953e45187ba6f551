"""
FastAPI dependencies wiring routers to the service singletons.

Tests replace these through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from ..error_handling import AuthenticationError
from ..services.auth import SESSION_COOKIE_NAME, SessionValidator, get_session_validator
from ..services.gallery import GalleryService, get_gallery_service
from ..services.image_delivery import ImageDeliveryService, get_image_delivery
from ..services.metadata import MetadataStore, get_metadata_store
from ..services.photos import PhotoRepository, get_photo_repository
from ..services.settings_store import SettingsStore, get_settings_store
from ..services.storage import BlobStore, get_blob_store


def get_repository() -> PhotoRepository:
    return get_photo_repository()


def get_gallery() -> GalleryService:
    return get_gallery_service()


def get_settings() -> SettingsStore:
    return get_settings_store()


def get_delivery() -> ImageDeliveryService:
    return get_image_delivery()


def get_validator() -> SessionValidator:
    return get_session_validator()


def get_metadata() -> MetadataStore:
    return get_metadata_store()


def get_blobs() -> BlobStore:
    return get_blob_store()


def require_admin(request: Request, validator: SessionValidator = Depends(get_validator)) -> None:
    """Reject the request unless it carries a valid admin session cookie."""
    if not validator.validate(request.cookies.get(SESSION_COOKIE_NAME)):
        raise AuthenticationError(
            "Admin session required",
            details={"path": request.url.path, "method": request.method},
        )
