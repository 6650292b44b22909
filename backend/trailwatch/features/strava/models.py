"""
Strava token models.

StravaAuthRow stores the single OAuth credential with both tokens
encrypted at rest. TokenData is the decrypted in-memory form.
"""

import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import BigInteger, Column, Integer, LargeBinary

from trailwatch.models.base import Base


class StravaAuthRow(Base):
    """
    Strava OAuth credential storage. Always row id 1.

    access_token / refresh_token hold Fernet ciphertext, never plaintext.
    """

    __tablename__ = "strava_auth"

    id = Column(Integer, primary_key=True)
    access_token = Column(LargeBinary, nullable=False)
    refresh_token = Column(LargeBinary, nullable=False)
    expires_at = Column(BigInteger, nullable=False)  # Unix timestamp

    def __repr__(self):
        return f"<StravaAuthRow expires_at={self.expires_at}>"


@dataclass(frozen=True)
class TokenData:
    """OAuth credential. Replaced wholesale on every refresh."""

    access_token: str
    refresh_token: str
    expires_at: int  # Unix timestamp

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if access token is expired."""
        if now is None:
            now = time.time()
        return self.expires_at < now

    def __repr__(self):
        # Never leak secrets into logs
        return f"TokenData(expires_at={self.expires_at})"
