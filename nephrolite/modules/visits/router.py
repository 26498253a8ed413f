import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, require_roles, Principal
from nephrolite.modules.visits.schemas import VisitCreate, VisitUpdate, VisitOut
from nephrolite.modules.visits.service import VisitService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> VisitService:
    return VisitService(session)

@router.post("", response_model=VisitOut, status_code=201)
async def create_visit(
    payload: VisitCreate,
    principal: Principal = Depends(require_roles("doctor", "nurse")),
    service: VisitService = Depends(svc),
):
    return await service.create(principal.org_id, payload, actor_id=principal.user_id)

@router.get("", response_model=list[VisitOut], dependencies=[Depends(require_scopes("visits:read"))])
async def list_visits(
    patient_id: uuid.UUID | None = Query(None, alias="patientId"),
    principal: Principal = Depends(get_principal),
    service: VisitService = Depends(svc),
):
    return await service.list(principal.org_id, patient_id)

@router.get("/recent", response_model=list[VisitOut], dependencies=[Depends(require_scopes("visits:read"))])
async def recent_visits(
    count: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    service: VisitService = Depends(svc),
):
    return await service.recent(principal.org_id, count)

@router.get("/{visit_id}", response_model=VisitOut, dependencies=[Depends(require_scopes("visits:read"))])
async def get_visit(
    visit_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: VisitService = Depends(svc),
):
    obj = await service.get(principal.org_id, visit_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Visit not found")
    return obj

@router.patch("/{visit_id}", response_model=VisitOut, dependencies=[Depends(require_scopes("visits:write"))])
async def update_visit(
    visit_id: uuid.UUID,
    payload: VisitUpdate,
    principal: Principal = Depends(get_principal),
    service: VisitService = Depends(svc),
):
    obj = await service.update(principal.org_id, visit_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Visit not found")
    return obj

@router.delete("/{visit_id}", status_code=204, dependencies=[Depends(require_scopes("visits:write"))])
async def delete_visit(
    visit_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: VisitService = Depends(svc),
):
    ok = await service.delete(principal.org_id, visit_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Visit not found")
    return
