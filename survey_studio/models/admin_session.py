"""AdminSession model backing administrator sign-in.

Session tokens are handed to the client once and only their salted hash is
stored, so a leaked table cannot be replayed.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from survey_studio.models.database import Base


class AdminSession(Base):
    """Model for an authenticated administrator session.

    Attributes:
        id: Primary key
        token_hash: SHA-256 hash of the session token (64 hex chars)
        email: Email of the signed-in admin
        created_at: When the session was created
        expires_at: When the session stops being valid
    """

    __tablename__ = "admin_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of session token"
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the session has passed its expiry time.

        SQLite hands back naive datetimes; those are treated as UTC.
        """
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at

    def __repr__(self) -> str:
        return (
            f"<AdminSession(id={self.id}, "
            f"token_hash={self.token_hash[:12]}..., "
            f"email={self.email})>"
        )
