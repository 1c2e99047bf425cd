from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from chirpy.core.context import ApiContext
from chirpy.core.database import get_db
from chirpy.dependencies.auth import get_api_context
from chirpy.services.users import delete_all_users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

METRICS_TEMPLATE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>"""


@router.get("/metrics", response_class=HTMLResponse)
def metrics(context: ApiContext = Depends(get_api_context)) -> str:
    return METRICS_TEMPLATE.format(hits=context.hits.value)


@router.post("/reset")
def reset(
    db: Session = Depends(get_db),
    context: ApiContext = Depends(get_api_context),
) -> dict[str, bool]:
    """Dev only: delete every user (and their chirps/refresh tokens) and zero the hit counter."""
    if not context.is_dev:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot reset outside of development")

    deleted = delete_all_users(db)
    context.hits.reset()
    logger.info("Admin reset: deleted %s users, hit counter zeroed", deleted)
    return {"deleted": True}
