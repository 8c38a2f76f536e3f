# jobboard/token.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import jwt

from .config import Settings
from .errors import AuthenticationError

INVALID_TOKEN_MESSAGE = "Invalid or expired token."


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str


def create_access_token(
    settings: Settings, user_id: int, email: str, expires_delta: timedelta | None = None
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta if expires_delta is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user_id),
        "userId": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> Principal:
    """Verify signature and expiry; any failure is reported the same way."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError:
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    user_id = payload.get("userId")
    email = payload.get("email")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return Principal(user_id=user_id, email=email)
