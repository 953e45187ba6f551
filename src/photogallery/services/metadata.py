"""
Metadata store for photo records and the settings document.

The store is a flat key to JSON-text mapping with a "list all keys"
operation. It offers atomic single-key reads and writes but no secondary
indexes and no transactions spanning several keys; callers build every
higher-level guarantee on top of that.

The DuckDB implementation keeps one connection per store and serialises
access to it with a lock, so a store instance may be shared by the request
threads of the API server.
"""

import threading

import duckdb

from ..config import get_metadata_db_path
from ..error_handling import StorageReadError, StorageWriteError
from ..logging_config import get_logger
from ..models.database import DatabaseManager, get_database_manager
from ..models.schema import DOCUMENTS_TABLE

logger = get_logger(__name__)


class MetadataStore:
    """Key to JSON-document mapping shared by photo records and settings."""

    def get(self, key: str) -> str | None:
        """Return the raw document stored under ``key``, or None."""
        raise NotImplementedError

    def put(self, key: str, value: str) -> None:
        """Create or replace the document stored under ``key``."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove ``key``; removing a missing key is a no-op."""
        raise NotImplementedError

    def list_keys(self) -> list[str]:
        """All keys currently stored, in ascending order."""
        raise NotImplementedError

    def check_health(self) -> bool:
        return True


class DuckDBMetadataStore(MetadataStore):
    """
    Metadata store backed by a DuckDB ``documents`` table.

    Attributes:
        db_path: DuckDB file path, or ":memory:"
        db_manager: Database manager owning the connection
    """

    def __init__(self, db_path: str, db_manager: DatabaseManager | None = None):
        """
        Open (creating if needed) the DuckDB database at ``db_path``.

        Raises:
            StorageReadError: If the database cannot be opened or initialised
        """
        self.db_path = db_path
        self._lock = threading.Lock()

        try:
            self.db_manager = db_manager or get_database_manager(db_path, create_if_missing=True)
        except (RuntimeError, duckdb.Error) as e:
            raise StorageReadError(
                f"Failed to open metadata database: {e}", details={"db_path": db_path}, original_exception=e
            ) from e

        logger.info("metadata_store_initialized", db_path=db_path)

    def get(self, key: str) -> str | None:
        try:
            with self._lock:
                rows = self.db_manager.execute_query(f"SELECT value FROM {DOCUMENTS_TABLE} WHERE key = ?", [key])
        except duckdb.Error as e:
            raise StorageReadError(
                f"Failed to read metadata '{key}': {e}", details={"key": key}, original_exception=e
            ) from e

        if not rows:
            return None
        value: str = rows[0][0]
        return value

    def put(self, key: str, value: str) -> None:
        try:
            with self._lock:
                self.db_manager.execute_query(
                    f"INSERT OR REPLACE INTO {DOCUMENTS_TABLE} (key, value) VALUES (?, ?)", [key, value]
                )
        except duckdb.Error as e:
            raise StorageWriteError(
                f"Failed to write metadata '{key}': {e}", details={"key": key}, original_exception=e
            ) from e

        logger.debug("metadata_written", key=key, size=len(value))

    def delete(self, key: str) -> None:
        try:
            with self._lock:
                self.db_manager.execute_query(f"DELETE FROM {DOCUMENTS_TABLE} WHERE key = ?", [key])
        except duckdb.Error as e:
            raise StorageWriteError(
                f"Failed to delete metadata '{key}': {e}", details={"key": key}, original_exception=e
            ) from e

        logger.debug("metadata_deleted", key=key)

    def list_keys(self) -> list[str]:
        try:
            with self._lock:
                rows = self.db_manager.execute_query(f"SELECT key FROM {DOCUMENTS_TABLE} ORDER BY key")
        except duckdb.Error as e:
            raise StorageReadError(f"Failed to list metadata keys: {e}", original_exception=e) from e

        return [row[0] for row in rows]

    def check_health(self) -> bool:
        try:
            with self._lock:
                self.db_manager.execute_query("SELECT 1")
            return True
        except duckdb.Error as e:
            logger.error("metadata_health_check_failed", error=str(e))
            return False

    def close(self) -> None:
        with self._lock:
            self.db_manager.close()


_metadata_store: MetadataStore | None = None


def get_metadata_store() -> MetadataStore:
    """Get the global metadata store instance."""
    global _metadata_store

    if _metadata_store is None:
        _metadata_store = DuckDBMetadataStore(get_metadata_db_path())

    return _metadata_store
