"""Session token hashing for admin sign-in.

Tokens are hashed with SHA-256 and an application salt before storage, so
the admin_sessions table never holds a usable credential. Hashing is
deterministic, which lets a presented token be looked up by its hash.
"""

import hashlib
import secrets

from survey_studio.config import get_settings


class TokenHasher:
    """
    One-way hashing service for admin session tokens.

    Security notes:
    - Salt must be kept secret and never committed to git
    - Changing salt signs out every admin
    - Full hashes should not appear in logs; use truncate_for_logging()
    """

    @staticmethod
    def generate_token() -> str:
        """Create a new URL-safe random session token."""
        return secrets.token_urlsafe(32)

    @staticmethod
    def hash_token(token: str) -> str:
        """
        One-way hash of a session token with application salt.

        Args:
            token: Token as handed to the client

        Returns:
            64-character hex string (SHA-256 hash)

        Example:
            >>> TokenHasher.hash_token("abc") == TokenHasher.hash_token("abc")
            True
        """
        settings = get_settings()
        salted = f"{token.strip()}:{settings.session_token_salt}"
        return hashlib.sha256(salted.encode('utf-8')).hexdigest()

    @staticmethod
    def truncate_for_logging(token_hash: str) -> str:
        """
        Truncate hash for safe logging (first 12 chars).

        Example:
            >>> TokenHasher.truncate_for_logging("a1b2c3d4e5f6" + "0" * 52)
            'a1b2c3d4e5f6...'
        """
        return f"{token_hash[:12]}..."
