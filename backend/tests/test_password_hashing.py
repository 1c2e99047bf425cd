from __future__ import annotations

from chirpy.core.security import hash_password, verify_password, verify_password_or_dummy


def test_hash_is_salted_and_verifies():
    first = hash_password("04234")
    second = hash_password("04234")
    assert first != second
    assert first.startswith("$argon2")
    assert verify_password("04234", first)
    assert verify_password("04234", second)


def test_wrong_password_does_not_verify():
    assert verify_password("wrong", hash_password("04234")) is False


def test_unrecognized_hash_does_not_verify():
    assert verify_password("04234", "not-a-hash") is False


def test_dummy_verification_for_unknown_user():
    assert verify_password_or_dummy("04234", None) is False
    assert verify_password_or_dummy("04234", hash_password("04234")) is True
