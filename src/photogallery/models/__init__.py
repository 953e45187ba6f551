"""
Models module for photogallery.

This module contains data models and schemas:
- PhotoRecord: metadata document for one uploaded photo
- SiteSettings: settings document with defaults resolved
- DatabaseManager: DuckDB connection and schema management
"""

from .database import DatabaseManager, create_database, get_database_manager
from .photo import InvalidPhotoDocument, PhotoRecord
from .schema import get_schema_statements, validate_schema_compatibility
from .settings import SETTINGS_KEY, SiteSettings

__all__ = [
    "PhotoRecord",
    "InvalidPhotoDocument",
    "SiteSettings",
    "SETTINGS_KEY",
    "DatabaseManager",
    "create_database",
    "get_database_manager",
    "get_schema_statements",
    "validate_schema_compatibility",
]
