"""Service for administrator sign-in."""

from __future__ import annotations

import hmac
import logging
import secrets
from typing import Iterable

from sprint_quiz.core.errors import AccessDenied, AuthenticationMissing

logger = logging.getLogger(__name__)


class AdminAuthenticator:
    """Checks credentials against the configured admin list and tracks session tokens."""

    def __init__(self, admin_emails: Iterable[str], admin_password: str | None) -> None:
        self._admin_emails = {email.strip().lower() for email in admin_emails if email.strip()}
        self._admin_password = admin_password
        self._sessions: dict[str, str] = {}

    def is_admin_email(self, email: str | None) -> bool:
        return bool(email) and email.strip().lower() in self._admin_emails

    def login(self, email: str, password: str) -> str:
        """Return a new session token.

        Raises AuthenticationMissing for bad credentials and AccessDenied when the
        credentials are valid but the address is not on the admin list.
        """
        if not self._admin_password or not self._admin_emails:
            raise AuthenticationMissing("Admin access is not configured")
        password_ok = hmac.compare_digest(password.encode("utf-8"), self._admin_password.encode("utf-8"))
        if not password_ok:
            logger.warning("Rejected admin login for %s", email)
            raise AuthenticationMissing("Failed to sign in")
        if not self.is_admin_email(email):
            logger.warning("Non-admin %s attempted to open the dashboard", email)
            raise AccessDenied("Access denied. Admin privileges required.")
        token = secrets.token_urlsafe(32)
        self._sessions[token] = email.strip().lower()
        logger.info("Admin %s signed in", self._sessions[token])
        return token

    def logout(self, token: str | None) -> None:
        if token:
            self._sessions.pop(token, None)

    def get_admin_email(self, token: str | None) -> str | None:
        if not token:
            return None
        return self._sessions.get(token)
