from __future__ import annotations

import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from chirpy.models.chirp import Chirp

MAX_CHIRP_LENGTH = 140
PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
CENSORED = "****"


def clean_body(body: str) -> str:
    """
    Replace profane words with ****. Words are split on single spaces only, so
    "Sharbert!" (punctuation attached) is left alone.
    """
    words = body.split(" ")
    return " ".join(CENSORED if w.lower() in PROFANE_WORDS else w for w in words)


def validate_body(body: str) -> str:
    if len(body) > MAX_CHIRP_LENGTH:
        raise HTTPException(status_code=400, detail="Chirp is too long")
    return clean_body(body)


def create_chirp(db: Session, user_id: uuid.UUID, body: str) -> Chirp:
    chirp = Chirp(body=validate_body(body), user_id=user_id)
    db.add(chirp)
    db.commit()
    db.refresh(chirp)
    return chirp


def list_chirps(db: Session, *, author_id: Optional[uuid.UUID] = None, sort: str = "asc") -> list[Chirp]:
    q = db.query(Chirp)
    if author_id is not None:
        q = q.filter(Chirp.user_id == author_id)
    order = Chirp.created_at.desc() if sort == "desc" else Chirp.created_at.asc()
    return q.order_by(order).all()


def get_chirp(db: Session, chirp_id: uuid.UUID) -> Chirp:
    chirp = db.get(Chirp, chirp_id)
    if not chirp:
        raise HTTPException(status_code=404, detail="Chirp not found")
    return chirp


def delete_chirp_for_user(db: Session, chirp_id: uuid.UUID, user_id: uuid.UUID) -> None:
    chirp = get_chirp(db, chirp_id)
    if chirp.user_id != user_id:
        raise HTTPException(status_code=403, detail="You can only delete your own chirps")
    db.delete(chirp)
    db.commit()
