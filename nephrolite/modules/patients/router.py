import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, require_roles, Principal
from nephrolite.modules.patients.schemas import PatientCreate, PatientUpdate, PatientOut, PatientPage
from nephrolite.modules.patients.service import PatientService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.post("", response_model=PatientOut, status_code=201)
async def create_patient(
    payload: PatientCreate,
    principal: Principal = Depends(require_roles("doctor", "admin", "nurse")),
    service: PatientService = Depends(svc),
):
    return await service.create(principal.org_id, payload, actor_id=principal.user_id)

@router.get("", response_model=list[PatientOut], dependencies=[Depends(require_scopes("patients:read"))])
async def list_patients(
    limit: int = Query(50, ge=1, le=500), offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    return await service.list(principal.org_id, limit, offset)

@router.get("/search", response_model=list[PatientOut], dependencies=[Depends(require_scopes("patients:read"))])
async def search_patients(
    q: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    return await service.search_by_name(principal.org_id, q, limit)

@router.get("/page", response_model=PatientPage, dependencies=[Depends(require_scopes("patients:read"))])
async def page_patients(
    cursor: str | None = None,
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    items, next_cursor = await service.page(principal.org_id, cursor, page_size)
    return PatientPage(items=[PatientOut.model_validate(o) for o in items], next_cursor=next_cursor)

@router.get("/lookup", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:read"))])
async def get_patient_by_nephro_id(
    nephro_id: str = Query(..., alias="nephroId"),
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.get_by_nephro_id(principal.org_id, nephro_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return obj

@router.get("/{patient_id}", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:read"))])
async def get_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.get(principal.org_id, patient_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return obj

@router.patch("/{patient_id}", response_model=PatientOut)
async def update_patient(
    patient_id: uuid.UUID,
    payload: PatientUpdate,
    principal: Principal = Depends(require_roles("doctor", "admin")),
    service: PatientService = Depends(svc),
):
    obj = await service.update(principal.org_id, patient_id, payload, actor_id=principal.user_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Patient not found")
    return obj

@router.delete("/{patient_id}", status_code=204)
async def delete_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(require_roles("admin")),
    service: PatientService = Depends(svc),
):
    ok = await service.delete(principal.org_id, patient_id, actor_id=principal.user_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Patient not found")
    return
