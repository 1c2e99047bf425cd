from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from chirpy.auth.credentials import extract_api_key
from chirpy.auth.errors import AuthError
from chirpy.core.context import ApiContext
from chirpy.core.database import get_db
from chirpy.dependencies.auth import get_api_context
from chirpy.schemas.webhook import USER_UPGRADED_EVENT, PolkaEventIn
from chirpy.services.users import upgrade_to_chirpy_red

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/polka", tags=["webhooks"])


def require_polka_key(request: Request, context: ApiContext = Depends(get_api_context)) -> None:
    try:
        api_key = extract_api_key(request.headers)
    except AuthError as exc:
        logger.warning("Rejected Polka webhook: %s (%s)", exc.code, exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Request not authenticated")

    expected = context.polka_key.encode("utf-8")
    if not expected or not hmac.compare_digest(api_key.encode("utf-8"), expected):
        logger.warning("Rejected Polka webhook: api key mismatch")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Request not authenticated")


@router.post("/webhooks", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_polka_key)])
def polka_webhook(payload: PolkaEventIn, db: Session = Depends(get_db)):
    if payload.event != USER_UPGRADED_EVENT:
        logger.info("Ignoring unsupported Polka event: %s", payload.event)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if payload.data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing event data")

    user = upgrade_to_chirpy_red(db, payload.data.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
