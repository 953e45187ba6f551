"""
Unit tests for the documents table schema.
"""

from unittest.mock import patch

from photogallery.models.schema import (
    DOCUMENTS_TABLE,
    REQUIRED_COLUMNS,
    get_schema_statements,
    validate_schema_compatibility,
)


def test_schema_statements():
    statements = get_schema_statements()

    assert len(statements) == 1
    assert f"CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE}" in statements[0]
    assert "key TEXT PRIMARY KEY" in statements[0]


def test_schema_statements_are_copies():
    get_schema_statements().clear()
    assert len(get_schema_statements()) == 1


def test_validate_schema_compatibility():
    assert REQUIRED_COLUMNS == {"key", "value"}
    assert validate_schema_compatibility() is True


def test_validate_schema_compatibility_missing_column():
    with patch("photogallery.models.schema.DOCUMENTS_TABLE_SCHEMA", "CREATE TABLE documents (key TEXT)"):
        assert validate_schema_compatibility() is False
