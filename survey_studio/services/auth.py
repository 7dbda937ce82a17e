"""Admin authentication backed by stored sessions.

A single administrator account is configured through settings. Signing in
issues a random token; the token's hash is stored with an expiry and checked
on every admin route.
"""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from survey_studio.config import Settings
from survey_studio.errors import NotFoundError
from survey_studio.models.admin_session import AdminSession
from survey_studio.services.data_client import DataClient
from survey_studio.services.token_hasher import TokenHasher
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)


class AuthError(Exception):
    """Raised when sign-in credentials are rejected."""
    pass


class AuthClient:
    """Session-based admin identity.

    Example:
        >>> auth = AuthClient(client, settings)
        >>> token, session = auth.sign_in("admin@example.com", "secret1")
        >>> auth.get_session(token).email
        'admin@example.com'
        >>> auth.sign_out(token)
        True
    """

    def __init__(self, client: DataClient, settings: Settings):
        """Initialize auth client.

        Args:
            client: Data client for the admin_sessions table
            settings: Settings holding the admin credentials and session TTL
        """
        self.client = client
        self.settings = settings

    def _credentials_match(self, email: str, password: str) -> bool:
        email_ok = hmac.compare_digest(email.strip().lower(), self.settings.admin_email)
        password_ok = hmac.compare_digest(password, self.settings.admin_password)
        return email_ok and password_ok

    def sign_in(self, email: str, password: str) -> Tuple[str, AdminSession]:
        """Check credentials and open a session.

        Returns:
            Tuple of (token, AdminSession); the token is not stored

        Raises:
            AuthError: If the credentials don't match
            PersistenceError: If the session can't be saved
        """
        if not self._credentials_match(email, password):
            logger.warning("Rejected admin sign-in attempt")
            raise AuthError("Invalid email or password")

        token = TokenHasher.generate_token()
        token_hash = TokenHasher.hash_token(token)
        now = datetime.now(timezone.utc)

        session = self.client.insert(AdminSession, [{
            "token_hash": token_hash,
            "email": self.settings.admin_email,
            "created_at": now,
            "expires_at": now + timedelta(hours=self.settings.session_ttl_hours),
        }])[0]

        logger.info(f"Admin signed in: session {TokenHasher.truncate_for_logging(token_hash)}")
        return token, session

    def get_session(self, token: Optional[str]) -> Optional[AdminSession]:
        """Return the active session for a token, or None.

        Expired sessions are removed and reported as absent.

        Raises:
            PersistenceError: If the lookup fails
        """
        if not token:
            return None

        token_hash = TokenHasher.hash_token(token)
        try:
            session = self.client.fetch_one(AdminSession, {"token_hash": token_hash})
        except NotFoundError:
            return None

        if session.is_expired():
            logger.info(f"Admin session expired: {TokenHasher.truncate_for_logging(token_hash)}")
            self.client.delete(AdminSession, {"token_hash": token_hash})
            return None

        return session

    def sign_out(self, token: Optional[str]) -> bool:
        """End the session for a token.

        Returns:
            True if a session was removed, False if none existed
        """
        if not token:
            return False

        token_hash = TokenHasher.hash_token(token)
        removed = self.client.delete(AdminSession, {"token_hash": token_hash})

        if removed:
            logger.info(f"Admin signed out: session {TokenHasher.truncate_for_logging(token_hash)}")
        return removed > 0
