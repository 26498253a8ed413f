from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, Principal, require_scopes
from nephrolite.modules.audit.service import AuditService

router = APIRouter()

@router.get("/audit", dependencies=[Depends(require_scopes("audit:read"))])
async def list_audit(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
    limit: int = Query(50, ge=1, le=200),
    action: str | None = None,
):
    rows = await AuditService(session).list(principal.org_id, limit, action)
    # Return raw dicts for simplicity
    return [
        {
            "id": row.id,
            "actorUserId": row.actor_user_id,
            "action": row.action,
            "resourceType": row.resource_type,
            "resourceId": row.resource_id,
            "success": row.success,
            "details": row.details,
            "occurredAt": row.occurred_at,
        }
        for row in rows
    ]
