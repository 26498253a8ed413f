import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, Principal, require_scopes, require_roles
from nephrolite.core.constants import Role
from nephrolite.modules.users.schemas import UserCreate, UserUpdate, RoleChange, UserOut
from nephrolite.modules.users.service import UserService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(session)

@router.post("", response_model=UserOut, status_code=201)
async def create_user(payload: UserCreate, principal: Principal = Depends(require_roles("admin")), service: UserService = Depends(svc)):
    return await service.create(principal.org_id, payload)

@router.get("", response_model=list[UserOut], dependencies=[Depends(require_scopes("users:read"))])
async def list_users(
    active_only: bool = Query(True, alias="activeOnly"),
    role: Role | None = None,
    principal: Principal = Depends(get_principal),
    service: UserService = Depends(svc),
):
    if role:
        return await service.by_role(principal.org_id, role)
    return await service.list(principal.org_id, active_only)

@router.get("/lookup", response_model=UserOut, dependencies=[Depends(require_scopes("users:read"))])
async def find_user_by_email(email: str, principal: Principal = Depends(get_principal), service: UserService = Depends(svc)):
    obj = await service.find_by_email(principal.org_id, email)
    if not obj:
        raise HTTPException(status_code=404, detail="User not found")
    return obj

@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(require_scopes("users:read"))])
async def get_user(user_id: uuid.UUID, principal: Principal = Depends(get_principal), service: UserService = Depends(svc)):
    obj = await service.get(principal.org_id, user_id)
    if not obj:
        raise HTTPException(status_code=404, detail="User not found")
    return obj

@router.patch("/{user_id}", response_model=UserOut, dependencies=[Depends(require_scopes("users:write"))])
async def update_user(user_id: uuid.UUID, payload: UserUpdate, principal: Principal = Depends(get_principal), service: UserService = Depends(svc)):
    obj = await service.update(principal.org_id, user_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="User not found")
    return obj

@router.put("/{user_id}/role", response_model=UserOut)
async def change_role(user_id: uuid.UUID, payload: RoleChange, principal: Principal = Depends(require_roles("admin")), service: UserService = Depends(svc)):
    obj = await service.update_role(principal.org_id, user_id, payload.role)
    if not obj:
        raise HTTPException(status_code=404, detail="User not found")
    return obj
