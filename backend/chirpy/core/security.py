# chirpy/core/security.py
from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Verified against when the email lookup misses, so an unknown email costs one
# argon2 verification just like a wrong password does.
_DUMMY_PASSWORD_HASH = pwd_context.hash("chirpy-dummy-password")


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        return False


def verify_password_or_dummy(password: str, password_hash: str | None) -> bool:
    """
    Login-path verification. When there is no stored hash (unknown email) the
    password is still checked against a dummy hash and the result is False.
    """
    if password_hash is None:
        verify_password(password, _DUMMY_PASSWORD_HASH)
        return False
    return verify_password(password, password_hash)
