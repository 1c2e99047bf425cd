# chirpy/dependencies/auth.py
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from chirpy.auth.errors import UnauthorizedError
from chirpy.auth.session import SessionAuthenticator
from chirpy.core.context import ApiContext
from chirpy.core.database import get_db
from chirpy.models.user import User
from chirpy.services.refresh_tokens import RefreshTokenStore
from chirpy.services.users import get_user_by_id


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_api_context(request: Request) -> ApiContext:
    return request.app.state.context


def get_authenticator(request: Request) -> SessionAuthenticator:
    return request.app.state.authenticator


def get_refresh_token_store(db: Session = Depends(get_db)) -> RefreshTokenStore:
    return RefreshTokenStore(db)


def get_current_user_id(
    request: Request,
    authenticator: SessionAuthenticator = Depends(get_authenticator),
) -> uuid.UUID:
    """
    Access-protected routes: Authorization: Bearer <access token>.
    Every failure is the same 401; the specific reason is only logged.
    """
    try:
        return authenticator.authenticate_access(request.headers)
    except UnauthorizedError:
        raise _unauthorized()


def get_current_user(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise _unauthorized()
    return user


def get_refresh_credentials(
    request: Request,
    authenticator: SessionAuthenticator = Depends(get_authenticator),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
) -> tuple[str, uuid.UUID]:
    """Refresh-protected routes: Authorization: Bearer <refresh token>."""
    try:
        return authenticator.authenticate_refresh(request.headers, store)
    except UnauthorizedError:
        raise _unauthorized("Invalid refresh token")
