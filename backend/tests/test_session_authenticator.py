from __future__ import annotations

import logging
import uuid
from datetime import timedelta

import pytest

from chirpy.auth.errors import (
    BadSignatureError,
    MalformedCredentialError,
    MissingCredentialError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
    UnauthorizedError,
)
from chirpy.auth.session import SessionAuthenticator
from chirpy.auth.tokens import mint_access_token
from chirpy.services.refresh_tokens import RefreshTokenStore

SECRET = "session-secret"


@pytest.fixture()
def authenticator():
    return SessionAuthenticator(SECRET)


def test_authenticate_access(authenticator):
    user_id = uuid.uuid4()
    token = authenticator.issue_access_token(user_id)
    assert authenticator.authenticate_access({"Authorization": f"Bearer {token}"}) == user_id


@pytest.mark.parametrize(
    "headers, cause",
    [
        ({}, MissingCredentialError),
        ({"Authorization": "Token abc"}, MalformedCredentialError),
        ({"Authorization": "Bearer not-a-jwt"}, BadSignatureError),
    ],
)
def test_access_failures_collapse_to_unauthorized(authenticator, headers, cause):
    with pytest.raises(UnauthorizedError) as excinfo:
        authenticator.authenticate_access(headers)
    assert isinstance(excinfo.value.cause, cause)
    assert str(excinfo.value) == "Could not validate credentials"


def test_access_token_signed_with_other_secret(authenticator):
    token = mint_access_token(uuid.uuid4(), "other-secret")
    with pytest.raises(UnauthorizedError) as excinfo:
        authenticator.authenticate_access({"Authorization": f"Bearer {token}"})
    assert isinstance(excinfo.value.cause, BadSignatureError)


def test_failure_detail_is_logged_not_raised(authenticator, caplog):
    token = mint_access_token(uuid.uuid4(), "other-secret")
    with caplog.at_level(logging.WARNING, logger="chirpy.auth.session"):
        with pytest.raises(UnauthorizedError):
            authenticator.authenticate_access({"Authorization": f"Bearer {token}"})
    assert "bad_signature" in caplog.text
    assert token not in caplog.text


def test_authenticate_refresh(db_session, users, authenticator, clock):
    user, _ = users
    store = RefreshTokenStore(db_session, clock=clock)
    rt = store.create(user.id)

    token, user_id = authenticator.authenticate_refresh({"Authorization": f"Bearer {rt.token}"}, store)
    assert token == rt.token
    assert user_id == user.id


def test_refresh_failures_collapse(db_session, users, authenticator, clock):
    user, _ = users
    store = RefreshTokenStore(db_session, clock=clock)
    revoked = store.create(user.id)
    store.revoke(revoked.token)
    expired = store.create(user.id)

    cases = [
        ("0" * 64, TokenNotFoundError),
        (revoked.token, TokenRevokedError),
    ]
    for value, cause in cases:
        with pytest.raises(UnauthorizedError) as excinfo:
            authenticator.authenticate_refresh({"Authorization": f"Bearer {value}"}, store)
        assert isinstance(excinfo.value.cause, cause)

    clock.advance(days=61)
    with pytest.raises(UnauthorizedError) as excinfo:
        authenticator.authenticate_refresh({"Authorization": f"Bearer {expired.token}"}, store)
    assert isinstance(excinfo.value.cause, TokenExpiredError)


def test_access_ttl_is_configurable():
    authenticator = SessionAuthenticator(SECRET, access_ttl=timedelta(minutes=5))
    assert authenticator.codec.ttl == timedelta(minutes=5)
