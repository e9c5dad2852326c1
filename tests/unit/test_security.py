from datetime import timedelta

import pytest

from src.domain.exceptions import PermissionDeniedError
from src.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_malformed_hash_does_not_verify():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_access_token_carries_identity_claims():
    token = create_access_token("user-1", "user@example.com", "admin")

    claims = decode_access_token(token)

    assert claims["sub"] == "user-1"
    assert claims["email"] == "user@example.com"
    assert claims["role"] == "admin"
    assert claims["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token(
        "user-1",
        "user@example.com",
        "exhibitor",
        expires_delta=timedelta(seconds=-5),
    )

    with pytest.raises(PermissionDeniedError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(PermissionDeniedError):
        decode_access_token("not.a.token")
