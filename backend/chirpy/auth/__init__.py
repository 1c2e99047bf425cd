# chirpy/auth/__init__.py
"""
Authentication core.

- credentials: Authorization header parsing (Bearer / ApiKey)
- tokens: signed access token mint/validate
- session: SessionAuthenticator (access + refresh request classes)
- errors: typed failures, collapsed to UnauthorizedError for clients
"""
from chirpy.auth.credentials import extract_api_key, extract_bearer
from chirpy.auth.errors import (
    AuthenticationFailedError,
    AuthError,
    BadSignatureError,
    IssuerMismatchError,
    MalformedCredentialError,
    MalformedSubjectError,
    MissingCredentialError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
    UnauthorizedError,
)
from chirpy.auth.session import SessionAuthenticator
from chirpy.auth.tokens import AccessTokenCodec, mint_access_token, validate_access_token

__all__ = [
    "AccessTokenCodec",
    "AuthError",
    "AuthenticationFailedError",
    "BadSignatureError",
    "IssuerMismatchError",
    "MalformedCredentialError",
    "MalformedSubjectError",
    "MissingCredentialError",
    "SessionAuthenticator",
    "TokenExpiredError",
    "TokenNotFoundError",
    "TokenRevokedError",
    "UnauthorizedError",
    "extract_api_key",
    "extract_bearer",
    "mint_access_token",
    "validate_access_token",
]
