"""
Gallery pagination over an unordered photo listing.

The metadata store returns photos in no useful order, so every page is cut
from a full listing sorted here. Ordering is newest ``uploadedAt`` first.
Photos whose timestamp is missing or unparseable come after every dated
photo. Photos that still compare equal are ordered by id ascending, so the
result never depends on store iteration order.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..error_handling import ValidationError
from ..models.photo import PhotoRecord

_UNDATED = datetime.min.replace(tzinfo=UTC)


def _sort_key(record: PhotoRecord) -> tuple[int, datetime]:
    uploaded_at = record.uploaded_at_datetime
    if uploaded_at is None:
        return (0, _UNDATED)
    return (1, uploaded_at)


def sort_records(records: Iterable[PhotoRecord]) -> list[PhotoRecord]:
    """Order photos newest first, undated last, ties by id."""
    by_id = sorted(records, key=lambda record: record.id)
    # reverse=True keeps equal keys in their id order
    return sorted(by_id, key=_sort_key, reverse=True)


@dataclass
class PageResult:
    """One page of photos plus the pagination metadata the gallery needs."""

    items: list[PhotoRecord]
    page: int
    page_size: int
    total: int
    total_pages: int
    has_more: bool

    def pagination_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasMore": self.has_more,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "photos": [record.to_dict() for record in self.items],
            "pagination": self.pagination_dict(),
        }


def paginate(records: Iterable[PhotoRecord], page: int, page_size: int) -> PageResult:
    """
    Cut one page from a photo listing.

    Args:
        records: Every photo, in any order
        page: 1-based page number; pages past the end are empty, not errors
        page_size: Photos per page

    Returns:
        PageResult with ``page`` echoed back unclamped

    Raises:
        ValidationError: If page or page_size is below 1
    """
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise ValidationError(f"page must be an integer >= 1, got {page!r}", code="invalid_page")
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ValidationError(f"pageSize must be an integer >= 1, got {page_size!r}", code="invalid_page_size")

    ordered = sort_records(records)
    total = len(ordered)
    total_pages = math.ceil(total / page_size) if total else 0

    start = (page - 1) * page_size
    end = start + page_size

    return PageResult(
        items=ordered[start:end],
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        has_more=page < total_pages,
    )
