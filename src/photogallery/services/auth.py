"""Admin session validation.

The gallery has a single administrative identity unlocked by a shared
password. The API only talks to a ``SessionValidator``; the scheme behind
it can be swapped without touching the router or the core.
"""

import hashlib
import hmac
from typing import Protocol

from ..config import get_admin_password
from ..logging_config import get_logger, log_security_event, log_user_action

logger = get_logger(__name__)

SESSION_COOKIE_NAME = "session"
SESSION_MAX_AGE = 86400
ADMIN_USER_ID = "admin"


class SessionValidator(Protocol):
    """Issues and checks admin session tokens."""

    def issue(self, password: str) -> str | None:
        """Session token for a correct password, None otherwise."""
        ...

    def validate(self, token: str | None) -> bool:
        """Whether a presented token grants admin access."""
        ...


class SharedSecretSessionValidator:
    """Session tokens derived from the shared admin password.

    The token is an HMAC-SHA256 digest keyed by the password, so every
    login yields the same token and changing the password invalidates
    every outstanding session.
    """

    SESSION_CONTEXT = b"photogallery-admin-session"

    def __init__(self, admin_password: str) -> None:
        if not admin_password:
            raise ValueError("Admin password must not be empty")
        self._password = admin_password.encode("utf-8")
        self._expected_token = self._derive(self._password)

    def _derive(self, password: bytes) -> str:
        return hmac.new(password, self.SESSION_CONTEXT, hashlib.sha256).hexdigest()

    def issue(self, password: str) -> str | None:
        if not hmac.compare_digest(password.encode("utf-8"), self._password):
            log_security_event("login_failed")
            return None

        log_user_action(ADMIN_USER_ID, "login")
        return self._expected_token

    def validate(self, token: str | None) -> bool:
        if not token:
            return False
        return hmac.compare_digest(token.encode("utf-8"), self._expected_token.encode("utf-8"))


_session_validator: SessionValidator | None = None


def get_session_validator() -> SessionValidator:
    """Get the global session validator built from ADMIN_PASSWORD."""
    global _session_validator

    if _session_validator is None:
        _session_validator = SharedSecretSessionValidator(get_admin_password())

    return _session_validator
