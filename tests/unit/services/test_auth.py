"""
Unit tests for admin session validation.
"""

import pytest

from photogallery.config import get_config
from photogallery.services.auth import SharedSecretSessionValidator, get_session_validator


class TestSharedSecretSessionValidator:
    def test_issue_with_correct_password(self):
        validator = SharedSecretSessionValidator("secret")

        token = validator.issue("secret")

        assert token is not None
        assert len(token) == 64
        assert validator.validate(token) is True

    def test_issue_with_wrong_password(self):
        assert SharedSecretSessionValidator("secret").issue("Secret") is None

    def test_token_is_stable(self):
        assert SharedSecretSessionValidator("secret").issue("secret") == SharedSecretSessionValidator("secret").issue("secret")

    def test_password_change_invalidates_tokens(self):
        token = SharedSecretSessionValidator("old").issue("old")
        assert SharedSecretSessionValidator("new").validate(token) is False

    @pytest.mark.parametrize("token", [None, "", "secret", "0" * 64])
    def test_validate_rejects(self, token):
        assert SharedSecretSessionValidator("secret").validate(token) is False

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            SharedSecretSessionValidator("")


class TestGetSessionValidator:
    def test_uses_admin_password(self):
        validator = get_session_validator()

        assert validator.issue("test-password") is not None
        assert get_session_validator() is validator

    def test_development_default_password(self, monkeypatch):
        monkeypatch.delenv("ADMIN_PASSWORD")
        get_config().clear_cache()

        assert get_session_validator().issue("admin123") is not None

    def test_production_requires_password(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("ADMIN_PASSWORD")
        get_config().clear_cache()

        with pytest.raises(ValueError, match="ADMIN_PASSWORD"):
            get_session_validator()
