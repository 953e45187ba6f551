"""
Image delivery: blob fetch by logical path with an optional size hint.

Only originals are ever stored. A request under either namespace is served
from ``originals/<filename>``, and the ``thumbnail``/``medium`` hints are
produced on demand by the configured resizer.
"""

from dataclasses import dataclass

from ..config import get_medium_width, get_thumbnail_size
from ..error_handling import ImageProcessingError, NotFoundError
from ..logging_config import get_logger
from ..models.photo import ORIGINALS_PREFIX, THUMBNAILS_PREFIX, original_blob_path
from .image_processor import FIT_COVER, FIT_SCALE_DOWN, ImageResizer, ResizeSpec, get_image_processor
from .storage import BlobStore, get_blob_store

logger = get_logger(__name__)

NAMESPACES = (ORIGINALS_PREFIX, THUMBNAILS_PREFIX)


def size_specs() -> dict[str, ResizeSpec]:
    """Resize parameters for each supported size hint."""
    thumbnail_size = get_thumbnail_size()
    medium_width = get_medium_width()
    return {
        "thumbnail": ResizeSpec(fit=FIT_COVER, width=thumbnail_size, height=thumbnail_size),
        "medium": ResizeSpec(fit=FIT_SCALE_DOWN, width=medium_width),
    }


@dataclass
class ImageResponse:
    """Bytes to send plus the headers that describe them."""

    data: bytes
    content_type: str
    etag: str


class ImageDeliveryService:
    """Serves stored images, resizing on request."""

    def __init__(self, blob_store: BlobStore, resizer: ImageResizer, specs: dict[str, ResizeSpec] | None = None):
        self.blob_store = blob_store
        self.resizer = resizer
        self.specs = specs if specs is not None else size_specs()

    def resize_spec_for(self, size: str | None) -> ResizeSpec | None:
        """Resize parameters for a size hint; None means serve the original."""
        if not size:
            return None
        return self.specs.get(size)

    def fetch(self, namespace: str, filename: str, size: str | None = None) -> ImageResponse:
        """
        Load an image, resized when the size hint asks for it.

        Args:
            namespace: "originals" or "thumbnails"
            filename: Stored file name (one path segment)
            size: "thumbnail", "medium", or anything else for the original

        Raises:
            NotFoundError: If the path is not a known image path or no blob exists
            StorageReadError: If the blob store cannot be read
        """
        if namespace not in NAMESPACES or not self._is_plain_filename(filename):
            raise self._not_found(namespace, filename)

        stored = self.blob_store.get(original_blob_path(filename))
        if stored is None:
            raise self._not_found(namespace, filename)

        spec = self.resize_spec_for(size)
        if spec is None:
            return ImageResponse(data=stored.data, content_type=stored.content_type, etag=stored.etag)

        try:
            resized = self.resizer.resize(stored.data, stored.content_type, spec)
        except ImageProcessingError:
            logger.warning("resize_fallback_to_original", filename=filename, size=size)
            return ImageResponse(data=stored.data, content_type=stored.content_type, etag=stored.etag)

        return ImageResponse(data=resized.data, content_type=resized.content_type, etag=f"{stored.etag}-{size}")

    @staticmethod
    def _is_plain_filename(filename: str) -> bool:
        return bool(filename) and not filename.startswith(".") and "/" not in filename and "\\" not in filename

    @staticmethod
    def _not_found(namespace: str, filename: str) -> NotFoundError:
        return NotFoundError(
            f"Image not found: {namespace}/{filename}",
            code="image_not_found",
            user_message="Image not found",
            details={"namespace": namespace, "filename": filename},
        )


_image_delivery: ImageDeliveryService | None = None


def get_image_delivery() -> ImageDeliveryService:
    """Get the global image delivery service instance."""
    global _image_delivery

    if _image_delivery is None:
        _image_delivery = ImageDeliveryService(get_blob_store(), get_image_processor())

    return _image_delivery
