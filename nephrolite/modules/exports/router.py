import json
import uuid
from typing import Literal
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, Principal
from nephrolite.modules.exports.service import ExportService

router = APIRouter(dependencies=[Depends(require_scopes("exports:read"))])

def svc(session: AsyncSession = Depends(get_session)) -> ExportService:
    return ExportService(session)

@router.get("/exports/patients/{patient_id}.json")
async def export_patient_bundle(patient_id: uuid.UUID, principal: Principal = Depends(get_principal),
                                service: ExportService = Depends(svc)):
    bundle = await service.patient_bundle(principal.org_id, patient_id)
    if bundle is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    body = json.dumps(bundle, default=str, ensure_ascii=False)
    return StreamingResponse(
        iter([body]),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="patient-{patient_id}.json"'},
    )

@router.get("/exports/{table}.csv")
async def export_table_csv(table: Literal["patients", "visits", "dialysis-sessions"],
                           principal: Principal = Depends(get_principal), service: ExportService = Depends(svc)):
    out = await service.table_csv(principal.org_id, table)
    return StreamingResponse(
        iter([out]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{table}.csv"'},
    )
