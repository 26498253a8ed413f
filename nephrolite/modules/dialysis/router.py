import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, require_roles, Principal
from nephrolite.modules.dialysis.schemas import DialysisSessionCreate, DialysisSessionUpdate, DialysisSessionOut
from nephrolite.modules.dialysis.service import DialysisSessionService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> DialysisSessionService:
    return DialysisSessionService(session)

@router.post("", response_model=DialysisSessionOut, status_code=201)
async def create_session(
    payload: DialysisSessionCreate,
    principal: Principal = Depends(require_roles("doctor", "nurse")),
    service: DialysisSessionService = Depends(svc),
):
    obj = await service.create(principal.org_id, payload, actor_id=principal.user_id)
    return DialysisSessionOut.from_row(obj)

@router.get("", response_model=list[DialysisSessionOut], dependencies=[Depends(require_scopes("dialysis:read"))])
async def list_sessions(
    patient_id: uuid.UUID | None = Query(None, alias="patientId"),
    principal: Principal = Depends(get_principal),
    service: DialysisSessionService = Depends(svc),
):
    return [DialysisSessionOut.from_row(r) for r in await service.list(principal.org_id, patient_id)]

@router.get("/recent", response_model=list[DialysisSessionOut], dependencies=[Depends(require_scopes("dialysis:read"))])
async def recent_sessions(
    count: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    service: DialysisSessionService = Depends(svc),
):
    return [DialysisSessionOut.from_row(r) for r in await service.recent(principal.org_id, count)]

@router.get("/{session_id}", response_model=DialysisSessionOut, dependencies=[Depends(require_scopes("dialysis:read"))])
async def get_session_by_id(
    session_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DialysisSessionService = Depends(svc),
):
    obj = await service.get(principal.org_id, session_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dialysis session not found")
    return DialysisSessionOut.from_row(obj)

@router.patch("/{session_id}", response_model=DialysisSessionOut, dependencies=[Depends(require_scopes("dialysis:write"))])
async def update_session(
    session_id: uuid.UUID,
    payload: DialysisSessionUpdate,
    principal: Principal = Depends(get_principal),
    service: DialysisSessionService = Depends(svc),
):
    obj = await service.update(principal.org_id, session_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Dialysis session not found")
    return DialysisSessionOut.from_row(obj)

@router.delete("/{session_id}", status_code=204, dependencies=[Depends(require_scopes("dialysis:write"))])
async def delete_session(
    session_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DialysisSessionService = Depends(svc),
):
    ok = await service.delete(principal.org_id, session_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Dialysis session not found")
    return
