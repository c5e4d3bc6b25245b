from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config


class SigningKeyMissingError(RuntimeError):
    """Raised when a token is requested but no signing secret is configured."""


def _signing_key() -> str:
    if not config.JWT_SECRET_KEY:
        raise SigningKeyMissingError("JWT_SECRET_KEY is not set; cannot issue tokens.")
    return config.JWT_SECRET_KEY


def create_access_token(user_id: int, verified: bool, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "verified": bool(verified),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, _signing_key(), algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, _signing_key(), algorithms=[config.JWT_ALGORITHM])
