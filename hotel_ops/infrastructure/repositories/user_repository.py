"""Read-only view over hotel users used for notification routing."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.domain.entities import Assignment, User
from hotel_ops.infrastructure.models import UserModel
from hotel_ops.utils import as_utc


class UserDirectory:
    """Answer who holds a role in a hotel and who a referenced user is."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> User | None:
        model = await self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    async def get_map_by_ids(self, user_ids: Iterable[int]) -> dict[int, User]:
        ids = {user_id for user_id in user_ids if user_id is not None}
        if not ids:
            return {}
        result = await self.session.execute(
            select(UserModel).where(UserModel.id.in_(ids))
        )
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    async def find_by_role(self, hotel_id: int, roles: Iterable[str]) -> set[int]:
        """Return ids of reachable users of ``hotel_id`` holding any of ``roles``."""

        wanted = {role.lower() for role in roles}
        if not wanted:
            return set()
        result = await self.session.execute(
            select(UserModel.id).where(
                UserModel.hotel_id == hotel_id,
                func.lower(UserModel.role).in_(wanted),
                UserModel.is_active.is_(True),
                UserModel.deleted.is_(False),
            )
        )
        return set(result.scalars().all())

    async def find_by_assignment(self, user_id: int | None) -> Assignment | None:
        """Return the hotel, role and department of ``user_id`` if it exists."""

        if user_id is None:
            return None
        model = await self.session.get(UserModel, user_id)
        if model is None or model.deleted:
            return None
        return Assignment(
            user_id=model.id,
            hotel_id=model.hotel_id,
            role=model.role,
            department_id=model.department_id,
        )

    async def is_vip(self, user_id: int | None) -> bool:
        if user_id is None:
            return False
        user = await self.get(user_id)
        return bool(user and user.is_vip())

    async def list_hotel_ids(self) -> Sequence[int]:
        """Return every hotel that has at least one reachable user."""

        result = await self.session.execute(
            select(UserModel.hotel_id)
            .where(UserModel.is_active.is_(True), UserModel.deleted.is_(False))
            .distinct()
            .order_by(UserModel.hotel_id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            hotel_id=model.hotel_id,
            name=model.name,
            email=model.email,
            role=model.role,
            department_id=model.department_id,
            loyalty_tier=model.loyalty_tier,
            last_login=as_utc(model.last_login),
            is_active=bool(model.is_active),
            deleted=bool(model.deleted),
        )


__all__ = ["UserDirectory"]
