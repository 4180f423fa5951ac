"""FastAPI dependency utilities."""

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.domain.entities import User
from hotel_ops.infrastructure.repositories import UserDirectory
from hotel_ops.infrastructure.security import decode_access_token
from hotel_ops.utils import Clock

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_db(connection: HTTPConnection) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the application's session factory."""

    async with connection.app.state.session_factory() as session:
        yield session


def get_clock(connection: HTTPConnection) -> Clock:
    return connection.app.state.clock


async def resolve_current_user(token: str, db: AsyncSession) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized("Invalid credentials") from exc

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _unauthorized("Invalid credentials") from exc

    user = await UserDirectory(db).get(user_id)
    if user is None or user.deleted:
        raise _unauthorized("User not found")
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return await resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user manages the hotel."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return current_user
