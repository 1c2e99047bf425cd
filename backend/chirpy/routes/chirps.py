from __future__ import annotations

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from chirpy.core.database import get_db
from chirpy.dependencies.auth import get_current_user_id
from chirpy.models.chirp import Chirp
from chirpy.schemas.chirp import ChirpCreate, ChirpOut
from chirpy.services.chirps import create_chirp, delete_chirp_for_user, get_chirp, list_chirps

router = APIRouter(prefix="/api/chirps", tags=["chirps"])


@router.post("", response_model=ChirpOut, status_code=status.HTTP_201_CREATED)
def add_chirp(
    payload: ChirpCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Chirp:
    # Author comes from the access token, never from the request body.
    return create_chirp(db, user_id, payload.body)


@router.get("", response_model=list[ChirpOut])
def get_chirps(
    author_id: Optional[uuid.UUID] = Query(default=None),
    sort: Literal["asc", "desc"] = Query(default="asc"),
    db: Session = Depends(get_db),
) -> list[Chirp]:
    return list_chirps(db, author_id=author_id, sort=sort)


@router.get("/{chirp_id}", response_model=ChirpOut)
def get_chirp_by_id(chirp_id: uuid.UUID, db: Session = Depends(get_db)) -> Chirp:
    return get_chirp(db, chirp_id)


@router.delete("/{chirp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chirp(
    chirp_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    delete_chirp_for_user(db, chirp_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
