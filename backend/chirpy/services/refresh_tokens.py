from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from chirpy.auth.errors import TokenExpiredError, TokenNotFoundError, TokenRevokedError
from chirpy.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)

REFRESH_TOKEN_TTL = timedelta(days=60)
REFRESH_TOKEN_BYTES = 32


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite round-trips tz-aware datetimes as naive. Treat those as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def generate_token_value() -> str:
    """256 bits of randomness, hex encoded (64 chars)."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def _log_prefix(token: str) -> str:
    return f"{token[:8]}..."


class RefreshTokenStore:
    """
    Persistent, revocable refresh tokens.

    State machine: Issued -> Active -> {Expired | Revoked}
    - Expired is computed from expires_at at validation time, never stored.
    - revoked_at goes from NULL to a timestamp exactly once.
    - Rows are never deleted here.

    `clock` is injectable so expiry can be exercised without waiting.
    """

    def __init__(
        self,
        db: Session,
        *,
        ttl: timedelta = REFRESH_TOKEN_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.ttl = ttl
        self.clock = clock

    def create(self, user_id: uuid.UUID) -> RefreshToken:
        now = self.clock()
        rt = RefreshToken(
            token=generate_token_value(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            expires_at=now + self.ttl,
            revoked_at=None,
        )
        self.db.add(rt)
        self.db.commit()
        self.db.refresh(rt)
        logger.info("Issued refresh token %s for user %s", _log_prefix(rt.token), user_id)
        return rt

    def lookup(self, token: str) -> RefreshToken:
        rt = self.db.get(RefreshToken, token)
        if rt is None:
            raise TokenNotFoundError("refresh token not found")
        return rt

    def validate(self, token: str) -> uuid.UUID:
        rt = self.lookup(token)
        if as_utc(rt.expires_at) <= self.clock():
            raise TokenExpiredError("refresh token expired")
        if rt.revoked_at is not None:
            raise TokenRevokedError("refresh token revoked")
        return rt.user_id

    def revoke(self, token: str) -> RefreshToken:
        """
        Mark the token revoked. Re-revoking is a no-op that keeps the first
        revoked_at; expired tokens can still be revoked.
        """
        rt = self.lookup(token)
        if rt.revoked_at is None:
            now = self.clock()
            rt.revoked_at = now
            rt.updated_at = now
            self.db.commit()
            logger.info("Revoked refresh token %s for user %s", _log_prefix(rt.token), rt.user_id)
        return rt
