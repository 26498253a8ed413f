import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, Principal
from nephrolite.modules.templates.schemas import TemplateIn, MasterDiagnosisIn, MasterDiagnosisOut
from nephrolite.modules.templates.service import TemplateService, MasterDiagnosisService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> TemplateService:
    return TemplateService(session)

def dx_svc(session: AsyncSession = Depends(get_session)) -> MasterDiagnosisService:
    return MasterDiagnosisService(session)

# templates belong to the calling user

@router.get("", dependencies=[Depends(require_scopes("templates:read"))])
async def get_templates(principal: Principal = Depends(get_principal), service: TemplateService = Depends(svc)):
    return await service.get_templates(principal.org_id, principal.user_id)

@router.put("", status_code=204, dependencies=[Depends(require_scopes("templates:write"))])
async def save_template(payload: TemplateIn, principal: Principal = Depends(get_principal), service: TemplateService = Depends(svc)):
    await service.save_template(principal.org_id, principal.user_id, payload)
    return

@router.get("/master-diagnoses", response_model=list[MasterDiagnosisOut],
            dependencies=[Depends(require_scopes("templates:read"))])
async def list_master_diagnoses(principal: Principal = Depends(get_principal), service: MasterDiagnosisService = Depends(dx_svc)):
    return await service.list(principal.org_id)

@router.put("/master-diagnoses", response_model=MasterDiagnosisOut,
            dependencies=[Depends(require_scopes("templates:write"))])
async def upsert_master_diagnosis(payload: MasterDiagnosisIn, principal: Principal = Depends(get_principal),
                                  service: MasterDiagnosisService = Depends(dx_svc)):
    return await service.upsert(principal.org_id, payload)

@router.delete("/master-diagnoses/{diagnosis_id}", status_code=204,
               dependencies=[Depends(require_scopes("templates:write"))])
async def delete_master_diagnosis(diagnosis_id: uuid.UUID, principal: Principal = Depends(get_principal),
                                  service: MasterDiagnosisService = Depends(dx_svc)):
    if not await service.delete(principal.org_id, diagnosis_id):
        raise HTTPException(status_code=404, detail="Diagnosis not found")
    return

@router.delete("/{name}", status_code=204, dependencies=[Depends(require_scopes("templates:write"))])
async def delete_template(name: str, principal: Principal = Depends(get_principal), service: TemplateService = Depends(svc)):
    if not await service.delete_template(principal.org_id, principal.user_id, name):
        raise HTTPException(status_code=404, detail="Template not found")
    return
