import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, require_roles, Principal
from nephrolite.modules.investigations.schemas import (
    InvestigationRecordCreate, InvestigationRecordUpdate, InvestigationRecordOut,
    InvestigationMasterIn, InvestigationMasterOut, InvestigationPanelIn, InvestigationPanelOut,
)
from nephrolite.modules.investigations.service import InvestigationService, MasterDataService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> InvestigationService:
    return InvestigationService(session)

def master_svc(session: AsyncSession = Depends(get_session)) -> MasterDataService:
    return MasterDataService(session)

# ---- Investigation records ----

@router.post("/investigations", response_model=InvestigationRecordOut, status_code=201,
             dependencies=[Depends(require_scopes("investigations:write"))])
async def create_record(
    payload: InvestigationRecordCreate,
    principal: Principal = Depends(get_principal),
    service: InvestigationService = Depends(svc),
):
    return await service.create(principal.org_id, payload)

@router.get("/investigations", response_model=list[InvestigationRecordOut],
            dependencies=[Depends(require_scopes("investigations:read"))])
async def list_records(
    patient_id: uuid.UUID | None = Query(None, alias="patientId"),
    principal: Principal = Depends(get_principal),
    service: InvestigationService = Depends(svc),
):
    return await service.list(principal.org_id, patient_id)

@router.get("/investigations/{record_id}", response_model=InvestigationRecordOut,
            dependencies=[Depends(require_scopes("investigations:read"))])
async def get_record(
    record_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: InvestigationService = Depends(svc),
):
    obj = await service.get(principal.org_id, record_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investigation record not found")
    return obj

@router.patch("/investigations/{record_id}", response_model=InvestigationRecordOut,
              dependencies=[Depends(require_scopes("investigations:write"))])
async def update_record(
    record_id: uuid.UUID,
    payload: InvestigationRecordUpdate,
    principal: Principal = Depends(get_principal),
    service: InvestigationService = Depends(svc),
):
    obj = await service.update(principal.org_id, record_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Investigation record not found")
    return obj

@router.delete("/investigations/{record_id}", status_code=204,
               dependencies=[Depends(require_scopes("investigations:write"))])
async def delete_record(
    record_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: InvestigationService = Depends(svc),
):
    if not await service.delete(principal.org_id, record_id):
        raise HTTPException(status_code=404, detail="Investigation record not found")
    return

# ---- Master data ----

@router.get("/master-data/investigations", response_model=list[InvestigationMasterOut],
            dependencies=[Depends(require_scopes("master:read"))])
async def list_master_tests(
    group: str | None = None,
    principal: Principal = Depends(get_principal),
    service: MasterDataService = Depends(master_svc),
):
    return await service.list_tests(principal.org_id, group)

@router.put("/master-data/investigations", response_model=InvestigationMasterOut)
async def upsert_master_test(
    payload: InvestigationMasterIn,
    principal: Principal = Depends(require_roles("admin", "doctor")),
    service: MasterDataService = Depends(master_svc),
):
    return await service.upsert_test(principal.org_id, payload)

@router.delete("/master-data/investigations/{code}", status_code=204)
async def delete_master_test(
    code: str,
    principal: Principal = Depends(require_roles("admin", "doctor")),
    service: MasterDataService = Depends(master_svc),
):
    if not await service.delete_test(principal.org_id, code):
        raise HTTPException(status_code=404, detail="Investigation not found")
    return

@router.get("/master-data/panels", response_model=list[InvestigationPanelOut],
            dependencies=[Depends(require_scopes("master:read"))])
async def list_panels(
    principal: Principal = Depends(get_principal),
    service: MasterDataService = Depends(master_svc),
):
    return await service.list_panels(principal.org_id)

@router.put("/master-data/panels", response_model=InvestigationPanelOut)
async def upsert_panel(
    payload: InvestigationPanelIn,
    principal: Principal = Depends(require_roles("admin", "doctor")),
    service: MasterDataService = Depends(master_svc),
):
    return await service.upsert_panel(principal.org_id, payload)

@router.delete("/master-data/panels/{panel_id}", status_code=204)
async def delete_panel(
    panel_id: uuid.UUID,
    principal: Principal = Depends(require_roles("admin", "doctor")),
    service: MasterDataService = Depends(master_svc),
):
    if not await service.delete_panel(principal.org_id, panel_id):
        raise HTTPException(status_code=404, detail="Panel not found")
    return

@router.post("/master-data/seed")
async def seed_master_data(
    principal: Principal = Depends(require_roles("admin")),
    service: MasterDataService = Depends(master_svc),
):
    return await service.seed_defaults(principal.org_id)
