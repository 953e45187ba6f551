"""Settings store: the single site-settings document."""

import json
from typing import Any

from ..error_handling import ValidationError
from ..logging_config import get_logger
from ..models.settings import SETTINGS_KEY, SiteSettings
from .metadata import MetadataStore, get_metadata_store

logger = get_logger(__name__)


class SettingsStore:
    """
    Reads and replaces the settings document.

    The document shares the metadata namespace with photo records under the
    reserved key; no other component reads or writes that key.
    """

    def __init__(self, metadata_store: MetadataStore) -> None:
        self.metadata_store = metadata_store

    def get(self) -> dict[str, Any]:
        """
        The stored document exactly as last put, or ``{}`` if none.

        A stored value that is not a JSON object is treated as absent.

        Raises:
            StorageReadError: If the metadata store cannot be read
        """
        raw = self.metadata_store.get(SETTINGS_KEY)
        if raw is None:
            return {}

        try:
            document = json.loads(raw)
        except ValueError as e:
            logger.warning("settings_document_unreadable", error=str(e))
            return {}

        if not isinstance(document, dict):
            logger.warning("settings_document_not_object", document_type=type(document).__name__)
            return {}
        return document

    def put(self, document: Any) -> None:
        """
        Replace the whole document; fields are not merged or validated.

        Raises:
            ValidationError: If the document is not a JSON object
            StorageWriteError: If the metadata store cannot be written
        """
        if not isinstance(document, dict):
            raise ValidationError("Settings must be a JSON object", code="invalid_settings")

        self.metadata_store.put(SETTINGS_KEY, json.dumps(document, ensure_ascii=False))
        logger.info("settings_updated", fields=sorted(document))

    def get_site_settings(self) -> SiteSettings:
        """Stored settings with every field resolved to its value or default."""
        return SiteSettings.from_document(self.get())


_settings_store: SettingsStore | None = None


def get_settings_store() -> SettingsStore:
    """Get the global settings store instance."""
    global _settings_store

    if _settings_store is None:
        _settings_store = SettingsStore(get_metadata_store())

    return _settings_store
