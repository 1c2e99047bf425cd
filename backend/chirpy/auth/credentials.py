# chirpy/auth/credentials.py
from __future__ import annotations

from typing import Mapping

from chirpy.auth.errors import MalformedCredentialError, MissingCredentialError

BEARER_SCHEME = "Bearer"
API_KEY_SCHEME = "ApiKey"


def _authorization_header(headers: Mapping[str, str]) -> str:
    # Starlette Headers are case-insensitive already; plain dicts are not.
    value = headers.get("Authorization")
    if value is None:
        for key, candidate in headers.items():
            if key.lower() == "authorization":
                value = candidate
                break
    if not value:
        raise MissingCredentialError("missing authorization header")
    return value


def _extract(headers: Mapping[str, str], scheme: str) -> str:
    parts = _authorization_header(headers).split(" ")
    if len(parts) != 2 or parts[0] != scheme or not parts[1]:
        raise MalformedCredentialError(f"invalid authorization header (expected '{scheme} <value>')")
    return parts[1]


def extract_bearer(headers: Mapping[str, str]) -> str:
    """Authorization: Bearer <token> -> <token>"""
    return _extract(headers, BEARER_SCHEME)


def extract_api_key(headers: Mapping[str, str]) -> str:
    """Authorization: ApiKey <key> -> <key>"""
    return _extract(headers, API_KEY_SCHEME)
