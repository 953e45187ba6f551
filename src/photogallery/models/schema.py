"""
Database schema definitions for the photogallery metadata store.

The metadata store is a flat key to JSON-document mapping, so the schema is
a single two-column table. Photo records and the settings document share it.
"""

DOCUMENTS_TABLE = "documents"

DOCUMENTS_TABLE_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE} (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

REQUIRED_COLUMNS = {"key", "value"}

ALL_SCHEMA_STATEMENTS = [DOCUMENTS_TABLE_SCHEMA]


def get_schema_statements() -> list[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create the documents table
    """
    return list(ALL_SCHEMA_STATEMENTS)


def validate_schema_compatibility() -> bool:
    """
    Check that the table definition declares every column the store relies on.

    Returns:
        True if schema is compatible, False otherwise
    """
    schema_lower = DOCUMENTS_TABLE_SCHEMA.lower()
    return all(column in schema_lower for column in REQUIRED_COLUMNS)
