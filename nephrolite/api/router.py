from fastapi import APIRouter
from nephrolite.modules.patients.router import router as patients_router
from nephrolite.modules.visits.router import router as visits_router
from nephrolite.modules.dialysis.router import router as dialysis_router
from nephrolite.modules.investigations.router import router as investigations_router
from nephrolite.modules.interventions.router import router as interventions_router
from nephrolite.modules.appointments.router import router as appointments_router
from nephrolite.modules.users.router import router as users_router
from nephrolite.modules.templates.router import router as templates_router
from nephrolite.modules.audit.router import router as audit_router
from nephrolite.modules.backups.router import router as backups_router
from nephrolite.modules.reports.router import router as reports_router
from nephrolite.modules.clinical.router import router as clinical_router
from nephrolite.modules.exports.router import router as exports_router

api_router = APIRouter()
api_router.include_router(patients_router, prefix="/patients", tags=["patients"])
api_router.include_router(visits_router, prefix="/visits", tags=["visits"])
api_router.include_router(dialysis_router, prefix="/dialysis-sessions", tags=["dialysis"])
api_router.include_router(interventions_router, prefix="/interventions", tags=["interventions"])
api_router.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(templates_router, prefix="/templates", tags=["templates"])
# these routers carry full paths (/investigations, /master-data, /backups, ...)
api_router.include_router(investigations_router, tags=["investigations"])
api_router.include_router(audit_router, tags=["audit"])
api_router.include_router(backups_router, tags=["backups"])
api_router.include_router(reports_router, tags=["reports"])
api_router.include_router(clinical_router, tags=["calculators"])
api_router.include_router(exports_router, tags=["exports"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
