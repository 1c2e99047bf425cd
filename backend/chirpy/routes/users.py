from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from chirpy.core.database import get_db
from chirpy.dependencies.auth import get_current_user
from chirpy.models.user import User
from chirpy.schemas.user import UserCreateIn, UserOut, UserUpdateIn
from chirpy.services.users import EmailAlreadyRegisteredError, create_user, update_credentials

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreateIn, db: Session = Depends(get_db)) -> User:
    try:
        return create_user(db, payload.email, payload.password)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=409, detail="Email already registered")


@router.put("", response_model=UserOut)
def update_me(
    payload: UserUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> User:
    try:
        return update_credentials(db, user, payload.email, payload.password)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=409, detail="Email already registered")
