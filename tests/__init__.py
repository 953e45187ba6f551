"""
Test suite for photogallery.

- Unit tests for models and services
- Integration tests for the HTTP API
"""
