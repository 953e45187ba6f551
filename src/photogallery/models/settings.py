"""
Site settings model for photogallery.

The settings document is stored in the metadata namespace under a reserved
key. Fields are independent and optional; defaults are resolved every time
the document is read, never when it is written.
"""

from dataclasses import asdict, dataclass
from typing import Any

SETTINGS_KEY = "site_settings"

LOAD_MODES = ("pagination", "infinite")

DEFAULT_PAGE_SIZE = 6


def is_reserved_key(key: str) -> bool:
    """Whether a metadata key belongs to the settings document rather than a photo."""
    return key == SETTINGS_KEY


def _text(document: dict[str, Any], key: str, default: str) -> str:
    value = document.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def resolve_page_size(document: dict[str, Any]) -> int:
    """Page size configured in a settings document, or the default when unset or invalid."""
    value = document.get("pageSize")
    if isinstance(value, bool):
        return DEFAULT_PAGE_SIZE
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            return DEFAULT_PAGE_SIZE
    if isinstance(value, int) and value >= 1:
        return value
    return DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class SiteSettings:
    """Settings document with every field resolved to a concrete value."""

    site_title: str = "My Gallery"
    site_keywords: str = "gallery,photos,images"
    site_description: str = "Every moment worth keeping"
    head_code: str = ""
    footer_code: str = ""
    copyright: str = ""
    load_mode: str = "pagination"
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_document(cls, document: dict[str, Any] | None) -> "SiteSettings":
        """Resolve a stored settings document; missing or mistyped fields fall back to defaults."""
        document = document or {}
        defaults = cls()

        load_mode = document.get("loadMode")
        if load_mode not in LOAD_MODES:
            load_mode = defaults.load_mode

        return cls(
            site_title=_text(document, "siteTitle", defaults.site_title),
            site_keywords=_text(document, "siteKeywords", defaults.site_keywords),
            site_description=_text(document, "siteDescription", defaults.site_description),
            head_code=_text(document, "headCode", defaults.head_code),
            footer_code=_text(document, "footerCode", defaults.footer_code),
            copyright=_text(document, "copyright", defaults.copyright),
            load_mode=load_mode,
            page_size=resolve_page_size(document),
        )

    def to_dict(self) -> dict[str, Any]:
        """Resolved settings with the same camelCase keys as the stored document."""
        values = asdict(self)
        return {
            "siteTitle": values["site_title"],
            "siteKeywords": values["site_keywords"],
            "siteDescription": values["site_description"],
            "headCode": values["head_code"],
            "footerCode": values["footer_code"],
            "copyright": values["copyright"],
            "loadMode": values["load_mode"],
            "pageSize": values["page_size"],
        }
