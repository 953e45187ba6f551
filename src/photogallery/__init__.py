"""
photogallery - Photo gallery backend with a JSON API

A backend for publishing a personal photo gallery with features including:
- Photo upload with metadata and blob storage kept consistent
- Paginated, newest-first gallery listings
- Image delivery with on-the-fly thumbnail and medium variants
- Site settings stored alongside photo metadata
- Shared-secret admin session for write operations
"""

__version__ = "0.1.0"
__author__ = "photogallery"
__description__ = "Photo gallery backend with a JSON API"
