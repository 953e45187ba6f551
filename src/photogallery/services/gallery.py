"""Gallery listing: repository scan, settings-driven page size and pagination."""

from ..logging_config import get_logger
from .pagination import PageResult, paginate
from .photos import PhotoRepository, get_photo_repository
from .settings_store import SettingsStore, get_settings_store

logger = get_logger(__name__)


class GalleryService:
    """Serves paged views of every photo, newest first."""

    def __init__(self, repository: PhotoRepository, settings_store: SettingsStore) -> None:
        self.repository = repository
        self.settings_store = settings_store

    def default_page_size(self) -> int:
        return self.settings_store.get_site_settings().page_size

    def list_photos(self, page: int = 1, page_size: int | None = None) -> PageResult:
        """
        One page of the gallery.

        Args:
            page: 1-based page number
            page_size: Photos per page; taken from the site settings when None

        Raises:
            ValidationError: If page or page_size is below 1
            StorageReadError: If the listing cannot be read
        """
        if page_size is None:
            page_size = self.default_page_size()

        result = paginate(self.repository.list_all(), page, page_size)

        logger.debug(
            "gallery_page_served",
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            returned=len(result.items),
        )
        return result


_gallery_service: GalleryService | None = None


def get_gallery_service() -> GalleryService:
    """Get the global gallery service instance."""
    global _gallery_service

    if _gallery_service is None:
        _gallery_service = GalleryService(get_photo_repository(), get_settings_store())

    return _gallery_service
