"""HTTP API for photogallery."""

from .app import create_app

__all__ = ["create_app"]
