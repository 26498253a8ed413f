import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import NotFoundError, service_operation
from nephrolite.modules.audit.service import AuditService
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.dialysis.repository import DialysisSessionRepository
from nephrolite.modules.dialysis.schemas import DialysisSessionCreate, DialysisSessionUpdate, split_session_fields
from nephrolite.modules.dialysis.models import DialysisSession

log = logging.getLogger(__name__)

class DialysisSessionService:
    def __init__(self, session: AsyncSession):
        self.repo = DialysisSessionRepository(session)
        self.patients = PatientRepository(session)
        self.audit = AuditService(session)
        self.session = session

    @service_operation("dialysis_sessions.create")
    async def create(self, org_id: uuid.UUID, payload: DialysisSessionCreate, actor_id: uuid.UUID | None = None) -> DialysisSession:
        """Insert the session and stamp the patient's last dialysis date in one transaction."""
        patient = await self.patients.get(org_id, payload.patient_id)
        if not patient:
            raise NotFoundError("Patient not found", metadata={"patientId": str(payload.patient_id)})

        top, stats, details = split_session_fields(payload.model_dump())
        try:
            obj = await self.repo.create(org_id, top=top, stats=stats, details=details, created_by=actor_id)
            if not patient.last_dialysis_date or obj.date_of_session >= patient.last_dialysis_date:
                patient.last_dialysis_date = obj.date_of_session
            if actor_id:
                patient.updated_by = actor_id
                await self.audit.record(org_id, actor_id, "CREATE_DIALYSIS_SESSION", "dialysis_session", str(obj.id),
                                        details={"patientId": str(patient.id), "date": obj.date_of_session})
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        log.info(f"Dialysis session created id={obj.id} patient_id={patient.id}")
        return obj

    async def get(self, org_id: uuid.UUID, session_id: uuid.UUID) -> DialysisSession | None:
        return await self.repo.get(org_id, session_id)

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None):
        return await self.repo.list(org_id, patient_id)

    async def recent(self, org_id: uuid.UUID, count: int = 10):
        return await self.repo.list(org_id, limit=count)

    @service_operation("dialysis_sessions.update")
    async def update(self, org_id: uuid.UUID, session_id: uuid.UUID, payload: DialysisSessionUpdate) -> DialysisSession | None:
        top, stats, details = split_session_fields(payload.model_dump(exclude_unset=True))
        obj = await self.repo.update(org_id, session_id, top=top, stats=stats, details=details)
        if obj:
            await self.session.commit()
        return obj

    @service_operation("dialysis_sessions.delete")
    async def delete(self, org_id: uuid.UUID, session_id: uuid.UUID) -> bool:
        ok = await self.repo.delete(org_id, session_id)
        if ok:
            await self.session.commit()
        return ok
