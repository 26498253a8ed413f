import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import NotFoundError, service_operation
from nephrolite.modules.audit.service import AuditService
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.visits.repository import VisitRepository
from nephrolite.modules.visits.schemas import VisitCreate, VisitUpdate
from nephrolite.modules.visits.models import Visit

log = logging.getLogger(__name__)

class VisitService:
    def __init__(self, session: AsyncSession):
        self.repo = VisitRepository(session)
        self.patients = PatientRepository(session)
        self.audit = AuditService(session)
        self.session = session

    @service_operation("visits.create")
    async def create(self, org_id: uuid.UUID, payload: VisitCreate, actor_id: uuid.UUID | None = None) -> Visit:
        patient = await self.patients.get(org_id, payload.patient_id)
        if not patient:
            raise NotFoundError("Patient not found", metadata={"patientId": str(payload.patient_id)})
        obj = await self.repo.create(org_id, created_by=actor_id, **payload.model_dump())
        if actor_id:
            await self.audit.record(org_id, actor_id, "CREATE_VISIT", "visit", str(obj.id),
                                    details={"patientId": str(patient.id)})
        await self.session.commit()
        log.info(f"Visit created id={obj.id} patient_id={patient.id}")
        return obj

    async def get(self, org_id: uuid.UUID, visit_id: uuid.UUID) -> Visit | None:
        return await self.repo.get(org_id, visit_id)

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None):
        return await self.repo.list(org_id, patient_id)

    async def recent(self, org_id: uuid.UUID, count: int = 10):
        return await self.repo.recent(org_id, count)

    @service_operation("visits.update")
    async def update(self, org_id: uuid.UUID, visit_id: uuid.UUID, payload: VisitUpdate) -> Visit | None:
        obj = await self.repo.update(org_id, visit_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj

    @service_operation("visits.delete")
    async def delete(self, org_id: uuid.UUID, visit_id: uuid.UUID) -> bool:
        ok = await self.repo.soft_delete(org_id, visit_id)
        if ok:
            await self.session.commit()
        return ok
