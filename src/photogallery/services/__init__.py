"""
Services module for photogallery.

This module contains the service classes that hold the gallery logic:
- PhotoRepository: photo CRUD keeping records and blobs consistent
- GalleryService: newest-first listing with pagination
- SettingsStore: the single site-settings document
- ImageDeliveryService: image fetch with on-demand size variants
- SharedSecretSessionValidator: admin session tokens
"""

from .auth import SessionValidator, SharedSecretSessionValidator, get_session_validator
from .gallery import GalleryService, get_gallery_service
from .image_delivery import ImageDeliveryService, ImageResponse, get_image_delivery
from .image_processor import ImageProcessor, ImageResizer, ResizeSpec, get_image_processor
from .metadata import DuckDBMetadataStore, MetadataStore, get_metadata_store
from .pagination import PageResult, paginate, sort_records
from .photos import PhotoRepository, get_photo_repository
from .settings_store import SettingsStore, get_settings_store
from .storage import BlobStore, GCSBlobStore, LocalBlobStore, StoredBlob, get_blob_store

__all__ = [
    "BlobStore",
    "GCSBlobStore",
    "LocalBlobStore",
    "StoredBlob",
    "get_blob_store",
    "MetadataStore",
    "DuckDBMetadataStore",
    "get_metadata_store",
    "PhotoRepository",
    "get_photo_repository",
    "PageResult",
    "paginate",
    "sort_records",
    "GalleryService",
    "get_gallery_service",
    "SettingsStore",
    "get_settings_store",
    "ImageResizer",
    "ImageProcessor",
    "ResizeSpec",
    "get_image_processor",
    "ImageDeliveryService",
    "ImageResponse",
    "get_image_delivery",
    "SessionValidator",
    "SharedSecretSessionValidator",
    "get_session_validator",
]
