import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes
from nephrolite.modules.users.models import User

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> User:
        obj = User(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, user_id: uuid.UUID) -> User | None:
        q = select(User).where(User.id == user_id, User.org_id == org_id, User.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def find_by_email(self, org_id: uuid.UUID, email: str) -> User | None:
        q = select(User).where(User.org_id == org_id, User.email == email.strip().lower(), User.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalars().first()

    async def list(self, org_id: uuid.UUID, *, active_only: bool = True, role: str | None = None) -> Sequence[User]:
        q = select(User).where(User.org_id == org_id, User.deleted_at.is_(None))
        if active_only:
            q = q.where(User.is_active.is_(True))
        if role:
            q = q.where(User.role == role)
        res = await self.session.execute(q.order_by(User.display_name))
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, user_id: uuid.UUID, **data) -> User | None:
        obj = await self.get(org_id, user_id)
        if not obj:
            return None
        apply_changes(obj, data)
        await self.session.flush()
        return obj
