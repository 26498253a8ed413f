import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import AlreadyExistsError, service_operation
from nephrolite.modules.users.repository import UserRepository
from nephrolite.modules.users.schemas import UserCreate, UserUpdate
from nephrolite.modules.users.models import User

log = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.repo = UserRepository(session)
        self.session = session

    @service_operation("users.create")
    async def create(self, org_id: uuid.UUID, payload: UserCreate) -> User:
        data = payload.model_dump()
        data["email"] = data["email"].strip().lower()
        if await self.repo.find_by_email(org_id, data["email"]):
            raise AlreadyExistsError("A user with this email already exists", metadata={"email": data["email"]})
        obj = await self.repo.create(org_id, **data)
        await self.session.commit()
        return obj

    async def get(self, org_id: uuid.UUID, user_id: uuid.UUID) -> User | None:
        return await self.repo.get(org_id, user_id)

    async def find_by_email(self, org_id: uuid.UUID, email: str) -> User | None:
        return await self.repo.find_by_email(org_id, email)

    async def list(self, org_id: uuid.UUID, active_only: bool = True):
        return await self.repo.list(org_id, active_only=active_only)

    async def by_role(self, org_id: uuid.UUID, role: str):
        return await self.repo.list(org_id, active_only=True, role=role)

    @service_operation("users.update")
    async def update(self, org_id: uuid.UUID, user_id: uuid.UUID, payload: UserUpdate) -> User | None:
        # role changes go through update_role only
        obj = await self.repo.update(org_id, user_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj

    @service_operation("users.update_role")
    async def update_role(self, org_id: uuid.UUID, user_id: uuid.UUID, role: str) -> User | None:
        obj = await self.repo.update(org_id, user_id, role=role)
        if obj:
            await self.session.commit()
            log.info(f"User {user_id} role set to {role}")
        return obj
