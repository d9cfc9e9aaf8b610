"""Security — verifies password hashing and access-token round trips.

Invariants:
    - verify_password never raises on bad or missing hashes
    - Only unexpired tokens of type "access" with a subject decode
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from tradedesk.config import get_settings
from tradedesk.core.errors import UnauthorizedError
from tradedesk.infrastructure.security import (
    create_access_token, decode_access_token, hash_password, verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_verify_without_hash():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_carries_subject_and_role():
    claims = decode_access_token(create_access_token("user-1", "Super Admin"))
    assert claims["sub"] == "user-1"
    assert claims["role"] == "Super Admin"
    assert claims["type"] == "access"


def _encode(payload: dict, secret: str | None = None) -> str:
    settings = get_settings()
    return jwt.encode(
        payload, secret or settings.jwt_secret_key, algorithm=settings.jwt_algorithm,
    )


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = _encode({"sub": "u", "type": "access", "iat": past, "exp": past + timedelta(hours=1)})
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_wrong_secret_rejected():
    with pytest.raises(UnauthorizedError):
        decode_access_token(_encode({"sub": "u", "type": "access"}, secret="other-secret"))


def test_non_access_token_rejected():
    with pytest.raises(UnauthorizedError):
        decode_access_token(_encode({"sub": "u", "type": "refresh"}))


def test_garbage_rejected():
    with pytest.raises(UnauthorizedError):
        decode_access_token("not.a.token")
