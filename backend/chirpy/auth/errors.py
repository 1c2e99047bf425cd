# chirpy/auth/errors.py
"""
Typed authentication failures.

Every failure in the credential/token pipeline raises a subclass of AuthError.
The specific class (and its `code`) is meant for server-side logs; clients only
ever see the collapsed UnauthorizedError / AuthenticationFailedError message.
"""
from __future__ import annotations


class AuthError(Exception):
    """Base exception for credential and token failures."""

    code = "auth_error"


class MissingCredentialError(AuthError):
    """Raised when the Authorization header is absent or empty."""

    code = "missing_credential"


class MalformedCredentialError(AuthError):
    """Raised when the Authorization header is not '<Scheme> <value>'."""

    code = "malformed_credential"


class BadSignatureError(AuthError):
    """Raised when an access token's signature does not verify."""

    code = "bad_signature"


class IssuerMismatchError(AuthError):
    """Raised when an access token was not issued by this service."""

    code = "issuer_mismatch"


class TokenExpiredError(AuthError):
    """Raised when an access or refresh token is past its expiry."""

    code = "expired"


class MalformedSubjectError(AuthError):
    """Raised when an access token's subject is not a user id."""

    code = "malformed_subject"


class TokenNotFoundError(AuthError):
    """Raised when no refresh token record matches the presented value."""

    code = "not_found"


class TokenRevokedError(AuthError):
    """Raised when a refresh token has been revoked."""

    code = "revoked"


class AuthenticationFailedError(AuthError):
    """Raised when an email/password pair does not authenticate."""

    code = "authentication_failed"

    def __init__(self, message: str = "Incorrect email or password") -> None:
        super().__init__(message)


class UnauthorizedError(AuthError):
    """Collapsed, client-safe failure. `cause` keeps the specific error for logging."""

    code = "unauthorized"

    def __init__(self, message: str = "Could not validate credentials", cause: AuthError | None = None) -> None:
        super().__init__(message)
        self.cause = cause
