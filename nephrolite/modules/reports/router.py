import uuid
from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from nephrolite.core.db import get_session
from nephrolite.core.security import get_principal, require_scopes, Principal
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.visits.repository import VisitRepository
from nephrolite.modules.reports.pdf import render_visit_report, report_filename

router = APIRouter()

@router.get("/patients/{patient_id}/visits/{visit_id}/report.pdf",
            dependencies=[Depends(require_scopes("reports:read"))])
async def visit_report(
    patient_id: uuid.UUID,
    visit_id: uuid.UUID,
    kind: Literal["discharge", "opinion"] = Query("discharge"),
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    patient = await PatientRepository(session).get(principal.org_id, patient_id)
    visit = await VisitRepository(session).get(principal.org_id, visit_id)
    if not patient or not visit or visit.patient_id != patient.id:
        raise HTTPException(status_code=404, detail="Visit not found")
    pdf = await run_in_threadpool(render_visit_report, patient, visit, kind)
    filename = report_filename(patient, visit, kind)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
