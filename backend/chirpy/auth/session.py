# chirpy/auth/session.py
from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Mapping

from chirpy.auth.credentials import extract_bearer
from chirpy.auth.errors import AuthError, UnauthorizedError
from chirpy.auth.tokens import ACCESS_TOKEN_TTL, AccessTokenCodec

if TYPE_CHECKING:
    from chirpy.services.refresh_tokens import RefreshTokenStore

logger = logging.getLogger(__name__)


class SessionAuthenticator:
    """
    Answers "who is making this request" for access-protected and
    refresh-protected routes.

    Specific failures (bad signature, expired, revoked, ...) are logged here and
    collapsed into UnauthorizedError so callers can't leak which check failed.
    """

    def __init__(self, secret: str, access_ttl: timedelta = ACCESS_TOKEN_TTL) -> None:
        self.codec = AccessTokenCodec(secret, access_ttl)

    def issue_access_token(self, user_id: uuid.UUID) -> str:
        return self.codec.mint(user_id)

    def authenticate_access(self, headers: Mapping[str, str]) -> uuid.UUID:
        try:
            token = extract_bearer(headers)
            return self.codec.validate(token)
        except AuthError as exc:
            raise self._collapse("access", exc) from exc

    def authenticate_refresh(self, headers: Mapping[str, str], store: RefreshTokenStore) -> tuple[str, uuid.UUID]:
        try:
            token = extract_bearer(headers)
            return token, store.validate(token)
        except AuthError as exc:
            raise self._collapse("refresh", exc) from exc

    @staticmethod
    def _collapse(kind: str, exc: AuthError) -> UnauthorizedError:
        logger.warning("Rejected %s credential: %s (%s)", kind, exc.code, exc)
        return UnauthorizedError(cause=exc)
