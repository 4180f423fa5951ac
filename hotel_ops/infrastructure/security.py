"""Access token helpers for the notification API."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from hotel_ops.config import get_settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode(
        {**data, "exp": expire}, settings.secret_key, algorithm=settings.token_algorithm
    )


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
