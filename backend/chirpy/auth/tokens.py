# chirpy/auth/tokens.py
"""
Access token codec.

Access tokens are HS256 JWTs carrying only an identity claim:
    iss = "chirpy", sub = <user uuid>, iat, exp

Nothing about issued access tokens is stored server-side, so validity is a pure
function of (token, secret, now). A leaked access token stays usable until `exp`;
the short fixed TTL is the only mitigation.

Validation order (each check raises its own error type):
- signature           -> BadSignatureError
- issuer              -> IssuerMismatchError
- expiry (exp <= now) -> TokenExpiredError
- subject is a UUID   -> MalformedSubjectError
"""
from __future__ import annotations

import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from chirpy.auth.errors import (
    BadSignatureError,
    IssuerMismatchError,
    MalformedSubjectError,
    TokenExpiredError,
)

TOKEN_ISSUER = "chirpy"
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(hours=1)

# Expiry, issuer and subject are checked by hand below so each failure keeps its own type.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_aud": False,
}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def mint_access_token(
    user_id: uuid.UUID,
    secret: str,
    ttl: timedelta = ACCESS_TOKEN_TTL,
    *,
    now: datetime | None = None,
) -> str:
    if not secret:
        raise ValueError("secret must be set to sign access tokens")
    if ttl.total_seconds() <= 0:
        raise ValueError("ttl must be positive")

    current = now or _now_utc()
    issued_at = int(current.timestamp())
    payload = {
        "iss": TOKEN_ISSUER,
        "sub": str(user_id),
        "iat": issued_at,
        # Rounded up from the unrounded issue time so the token lives at least `ttl`.
        "exp": int(math.ceil((current + ttl).timestamp())),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def _decode(token: str, secret: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], options=_DECODE_OPTIONS)
    except JWTError as e:
        raise BadSignatureError(f"failed to verify token: {e}") from e


def validate_access_token(token: str, secret: str, *, now: datetime | None = None) -> uuid.UUID:
    claims = _decode(token, secret)

    issuer = claims.get("iss")
    if issuer != TOKEN_ISSUER:
        raise IssuerMismatchError(f"expected issuer {TOKEN_ISSUER!r}, got {issuer!r}")

    exp = claims.get("exp")
    try:
        expires_at = float(exp)
    except (TypeError, ValueError):
        raise TokenExpiredError("token has no usable exp claim")
    current = (now or _now_utc()).timestamp()
    if expires_at <= current:
        raise TokenExpiredError("token is expired")

    subject = claims.get("sub")
    if not isinstance(subject, str):
        raise MalformedSubjectError("token subject is missing")
    try:
        return uuid.UUID(subject)
    except ValueError as e:
        raise MalformedSubjectError(f"token subject is not a user id: {subject!r}") from e


class AccessTokenCodec:
    """Binds the process-wide signing secret and access token TTL."""

    def __init__(self, secret: str, ttl: timedelta = ACCESS_TOKEN_TTL) -> None:
        if not secret:
            raise ValueError("secret must be set")
        self._secret = secret
        self.ttl = ttl

    def mint(self, user_id: uuid.UUID) -> str:
        return mint_access_token(user_id, self._secret, self.ttl)

    def validate(self, token: str) -> uuid.UUID:
        return validate_access_token(token, self._secret)
