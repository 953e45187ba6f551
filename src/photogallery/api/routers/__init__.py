"""API routers."""

from . import auth, images, photos, settings

__all__ = ["auth", "images", "photos", "settings"]
