import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.config import settings
from nephrolite.core.db import get_session
from nephrolite.core.errors import PermissionDeniedError
from nephrolite.modules.users.repository import UserRepository

http_bearer = HTTPBearer(auto_error=False)

class Principal(BaseModel):
    user_id: uuid.UUID
    org_id: uuid.UUID
    roles: list[str] = []
    scopes: list[str] = []
    # tokenless ENV=local principal; its roles come from settings
    local: bool = False

def _decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.REQUIRED_AUDIENCE)
        return payload
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")

async def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Principal:
    # In local, allow missing token and act as the configured local user
    if creds is None and settings.ENV == "local":
        return Principal(
            user_id=uuid.UUID(settings.LOCAL_USER_ID),
            org_id=uuid.UUID(settings.DEFAULT_ORG_ID),
            roles=list(settings.LOCAL_ROLES),
            scopes=["*"],
            local=True,
        )
    if creds is None:
        raise HTTPException(status_code=401, detail="Missing token")

    data = _decode_token(creds.credentials)
    try:
        user_id = uuid.UUID(str(data.get("sub") or data.get("user_id")))
        org_id = uuid.UUID(str(data.get("org_id") or settings.DEFAULT_ORG_ID))
    except ValueError:
        raise HTTPException(status_code=401, detail="Token subject is not a valid id")
    scopes = data.get("scopes", [])
    return Principal(user_id=user_id, org_id=org_id, scopes=scopes)

def require_scopes(*needed: str):
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        if "*" in principal.scopes:
            return principal
        if not set(needed).issubset(set(principal.scopes)):
            raise HTTPException(status_code=403, detail="Insufficient scopes")
        return principal
    return dep

def require_roles(*allowed: str):
    """Validated writes are gated on the role stored on the caller's user record.

    Role claims in the token are ignored, so a role change or deactivation
    takes effect on the next request. Callers without an active user record
    are denied.
    """
    async def dep(principal: Principal = Depends(get_principal), session: AsyncSession = Depends(get_session)) -> Principal:
        if not principal.local:
            user = await UserRepository(session).get(principal.org_id, principal.user_id)
            if user is None or not user.is_active:
                raise PermissionDeniedError(
                    "No active user record for the caller",
                    metadata={"required": list(allowed)},
                )
            principal = principal.model_copy(update={"roles": [user.role]})
        if not set(allowed) & set(principal.roles):
            raise PermissionDeniedError(
                f"This action requires one of the roles: {', '.join(allowed)}",
                metadata={"required": list(allowed)},
            )
        return principal
    return dep
