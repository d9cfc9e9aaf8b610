"""Security — password hashing (passlib bcrypt) and JWT access tokens (python-jose).

Invariants:
    - Access tokens carry sub (user id), role, iat, exp and type="access"
    - decode_access_token raises UnauthorizedError for anything but a valid, unexpired access token
    - Hash cost comes from settings.password_hash_rounds (tests lower it)

Design Decisions:
    - CryptContext built lazily and cached per rounds value: settings may change in tests
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

from tradedesk.config import get_settings
from tradedesk.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


@lru_cache
def _crypt_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    return _crypt_context(get_settings().password_hash_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return _crypt_context(get_settings().password_hash_rounds).verify(
            plain_password, hashed_password,
        )
    except ValueError as e:
        logger.warning(f"Unverifiable password hash: {e}")
        return False


def create_access_token(user_id: str, role: str | None = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        raise UnauthorizedError("Invalid or expired token")
    if claims.get("type") != "access" or not claims.get("sub"):
        raise UnauthorizedError("Invalid or expired token")
    return claims
