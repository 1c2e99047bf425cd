# chirpy/routes/auth.py
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from chirpy.auth.credentials import extract_bearer
from chirpy.auth.errors import AuthenticationFailedError, AuthError, TokenNotFoundError
from chirpy.auth.session import SessionAuthenticator
from chirpy.core.config import settings
from chirpy.core.database import get_db
from chirpy.core.rate_limit import limiter
from chirpy.core.security import verify_password_or_dummy
from chirpy.dependencies.auth import (
    get_authenticator,
    get_refresh_credentials,
    get_refresh_token_store,
)
from chirpy.models.user import User
from chirpy.schemas.auth import LoginIn, LoginOut, TokenOut
from chirpy.schemas.user import UserOut
from chirpy.services.refresh_tokens import RefreshTokenStore
from chirpy.services.users import get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _maybe_limit(rule: str):
    if not settings.ENABLE_RATE_LIMITING:
        def passthrough(fn):
            return fn
        return passthrough
    return limiter.limit(rule)


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Unknown email and wrong password both raise the same AuthenticationFailedError,
    and both pay for one password verification.
    """
    user = get_user_by_email(db, email)
    if not verify_password_or_dummy(password, user.hashed_password if user else None):
        raise AuthenticationFailedError()
    return user


@router.post("/login", response_model=LoginOut)
@_maybe_limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,  # noqa: ARG001 - required by slowapi
    payload: LoginIn,
    db: Session = Depends(get_db),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
):
    try:
        user = authenticate_user(db, payload.email, payload.password)
    except AuthenticationFailedError as exc:
        logger.info("Login failed for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))

    access_token = authenticator.issue_access_token(user.id)
    refresh_token = store.create(user.id)

    return LoginOut(
        **UserOut.model_validate(user).model_dump(),
        token=access_token,
        refresh_token=refresh_token.token,
    )


@router.post("/refresh", response_model=TokenOut)
def refresh(
    credentials: tuple[str, uuid.UUID] = Depends(get_refresh_credentials),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
):
    """
    Exchange a valid refresh token for a new access token. The refresh token
    itself is not rotated and its expiry does not slide.
    """
    _, user_id = credentials
    return {"token": authenticator.issue_access_token(user_id)}


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(
    request: Request,
    store: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    401: missing/malformed Authorization header
    404: no such refresh token
    204: revoked (also when it was already revoked or has expired)
    """
    try:
        token = extract_bearer(request.headers)
    except AuthError as exc:
        logger.warning("Rejected revoke request: %s (%s)", exc.code, exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        store.revoke(token)
    except TokenNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Refresh token not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
