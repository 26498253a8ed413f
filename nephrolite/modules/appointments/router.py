import uuid
from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, Principal, require_scopes
from nephrolite.core.values import DATE_PATTERN
from nephrolite.modules.appointments.schemas import (
    AppointmentCreate, AppointmentUpdate, AppointmentStatusChange, AppointmentOut,
)
from nephrolite.modules.appointments.service import AppointmentService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

@router.post("", response_model=AppointmentOut, status_code=201, dependencies=[Depends(require_scopes("appointments:write"))])
async def create_appointment(
    payload: AppointmentCreate,
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    return await service.create(principal.org_id, payload)

@router.get("", response_model=list[AppointmentOut], dependencies=[Depends(require_scopes("appointments:read"))])
async def list_appointments(
    patient_id: uuid.UUID | None = Query(None, alias="patientId"),
    status: str | None = None,
    limit: int = Query(200, ge=1, le=500), offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    return await service.list(principal.org_id, patient_id=patient_id, status=status, limit=limit, offset=offset)

@router.get("/by-date/{day}", response_model=list[AppointmentOut], dependencies=[Depends(require_scopes("appointments:read"))])
async def appointments_by_date(
    day: str = Path(..., pattern=DATE_PATTERN),
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    return await service.by_date(principal.org_id, day)

@router.get("/{appointment_id}", response_model=AppointmentOut, dependencies=[Depends(require_scopes("appointments:read"))])
async def get_appointment(
    appointment_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    obj = await service.get(principal.org_id, appointment_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return obj

@router.patch("/{appointment_id}", response_model=AppointmentOut, dependencies=[Depends(require_scopes("appointments:write"))])
async def update_appointment(
    appointment_id: uuid.UUID,
    payload: AppointmentUpdate,
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    obj = await service.update(principal.org_id, appointment_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return obj

@router.post("/{appointment_id}/status", response_model=AppointmentOut, dependencies=[Depends(require_scopes("appointments:write"))])
async def change_appointment_status(
    appointment_id: uuid.UUID,
    payload: AppointmentStatusChange,
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    obj = await service.update_status(principal.org_id, appointment_id, payload.status)
    if not obj:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return obj

@router.delete("/{appointment_id}", status_code=204, dependencies=[Depends(require_scopes("appointments:write"))])
async def delete_appointment(
    appointment_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: AppointmentService = Depends(svc),
):
    if not await service.delete(principal.org_id, appointment_id):
        raise HTTPException(status_code=404, detail="Appointment not found")
    return
