import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import NotFoundError, service_operation
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.appointments.repository import AppointmentRepository
from nephrolite.modules.appointments.schemas import AppointmentCreate, AppointmentUpdate
from nephrolite.modules.appointments.models import Appointment

log = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.appts = AppointmentRepository(session)
        self.patients = PatientRepository(session)
        self.session = session

    @service_operation("appointments.create")
    async def create(self, org_id: uuid.UUID, payload: AppointmentCreate) -> Appointment:
        patient = await self.patients.get(org_id, payload.patient_id)
        if not patient:
            raise NotFoundError("Patient not found", metadata={"patientId": str(payload.patient_id)})
        data = payload.model_dump()
        data["patient_name"] = data.get("patient_name") or f"{patient.first_name} {patient.last_name}"
        obj = await self.appts.create(org_id, **data)
        await self.session.commit()
        return obj

    async def get(self, org_id: uuid.UUID, appt_id: uuid.UUID) -> Appointment | None:
        return await self.appts.get(org_id, appt_id)

    async def list(self, org_id: uuid.UUID, *, patient_id: uuid.UUID | None = None, status: str | None = None,
                   limit: int = 200, offset: int = 0):
        return await self.appts.list(org_id, patient_id=patient_id, status=status, limit=limit, offset=offset)

    async def by_date(self, org_id: uuid.UUID, day: str):
        return await self.appts.by_date(org_id, day)

    @service_operation("appointments.update")
    async def update(self, org_id: uuid.UUID, appt_id: uuid.UUID, payload: AppointmentUpdate) -> Appointment | None:
        obj = await self.appts.update(org_id, appt_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj

    @service_operation("appointments.update_status")
    async def update_status(self, org_id: uuid.UUID, appt_id: uuid.UUID, status: str) -> Appointment | None:
        obj = await self.appts.update(org_id, appt_id, status=status)
        if obj:
            await self.session.commit()
            log.info(f"Appointment {appt_id} status -> {status}")
        return obj

    @service_operation("appointments.delete")
    async def delete(self, org_id: uuid.UUID, appt_id: uuid.UUID) -> bool:
        ok = await self.appts.soft_delete(org_id, appt_id)
        if ok:
            await self.session.commit()
        return ok
