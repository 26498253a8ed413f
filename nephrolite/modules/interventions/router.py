import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, Principal
from nephrolite.modules.interventions.schemas import InterventionCreate, InterventionUpdate, InterventionOut
from nephrolite.modules.interventions.service import InterventionService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> InterventionService:
    return InterventionService(session)

@router.post("", response_model=InterventionOut, status_code=201, dependencies=[Depends(require_scopes("interventions:write"))])
async def create_intervention(payload: InterventionCreate, principal: Principal = Depends(get_principal), service: InterventionService = Depends(svc)):
    return await service.create(principal.org_id, payload)

@router.get("", response_model=list[InterventionOut], dependencies=[Depends(require_scopes("interventions:read"))])
async def list_interventions(
    patient_id: uuid.UUID | None = Query(None, alias="patientId"),
    principal: Principal = Depends(get_principal),
    service: InterventionService = Depends(svc),
):
    return await service.list(principal.org_id, patient_id)

@router.get("/{intervention_id}", response_model=InterventionOut, dependencies=[Depends(require_scopes("interventions:read"))])
async def get_intervention(intervention_id: uuid.UUID, principal: Principal = Depends(get_principal), service: InterventionService = Depends(svc)):
    obj = await service.get(principal.org_id, intervention_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Intervention not found")
    return obj

@router.patch("/{intervention_id}", response_model=InterventionOut, dependencies=[Depends(require_scopes("interventions:write"))])
async def update_intervention(intervention_id: uuid.UUID, payload: InterventionUpdate, principal: Principal = Depends(get_principal), service: InterventionService = Depends(svc)):
    obj = await service.update(principal.org_id, intervention_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Intervention not found")
    return obj

@router.delete("/{intervention_id}", status_code=204, dependencies=[Depends(require_scopes("interventions:write"))])
async def delete_intervention(intervention_id: uuid.UUID, principal: Principal = Depends(get_principal), service: InterventionService = Depends(svc)):
    if not await service.delete(principal.org_id, intervention_id):
        raise HTTPException(status_code=404, detail="Intervention not found")
    return
