# chirpy/services/users.py
"""
User persistence helpers.

Responsibilities:
- Lookup by email / id (the login and refresh paths)
- Creating users and updating their credentials
- Applying the Polka "Chirpy Red" upgrade
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chirpy.core.security import hash_password
from chirpy.models.user import User

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(Exception):
    """Raised when creating/updating a user would duplicate an email."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: uuid.UUID) -> Optional[User]:
    return db.get(User, user_id)


def create_user(db: Session, email: str, password: str) -> User:
    normalized_email = normalize_email(email)
    if get_user_by_email(db, normalized_email):
        raise EmailAlreadyRegisteredError(normalized_email)

    user = User(email=normalized_email, hashed_password=hash_password(password), is_chirpy_red=False)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailAlreadyRegisteredError(normalized_email) from exc
    db.refresh(user)

    logger.info("Created user: id=%s, email=%s", user.id, normalized_email)
    return user


def update_credentials(db: Session, user: User, email: str, password: str) -> User:
    normalized_email = normalize_email(email)
    existing = get_user_by_email(db, normalized_email)
    if existing is not None and existing.id != user.id:
        raise EmailAlreadyRegisteredError(normalized_email)

    user.email = normalized_email
    user.hashed_password = hash_password(password)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailAlreadyRegisteredError(normalized_email) from exc
    db.refresh(user)

    logger.info("Updated credentials for user %s", user.id)
    return user


def upgrade_to_chirpy_red(db: Session, user_id: uuid.UUID) -> Optional[User]:
    """Returns None when the user does not exist. Upgrading twice is harmless."""
    user = get_user_by_id(db, user_id)
    if user is None:
        return None
    if not user.is_chirpy_red:
        user.is_chirpy_red = True
        db.commit()
        logger.info("Upgraded user %s to Chirpy Red", user_id)
    return user


def delete_all_users(db: Session) -> int:
    """Dev-only reset. Chirps and refresh tokens go with their users."""
    users = db.query(User).all()
    for user in users:
        db.delete(user)
    db.commit()
    return len(users)
