import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import NotFoundError, service_operation
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.interventions.repository import InterventionRepository
from nephrolite.modules.interventions.schemas import InterventionCreate, InterventionUpdate

class InterventionService:
    def __init__(self, session: AsyncSession):
        self.repo = InterventionRepository(session)
        self.patients = PatientRepository(session)
        self.session = session

    @service_operation("interventions.create")
    async def create(self, org_id: uuid.UUID, payload: InterventionCreate):
        if not await self.patients.get(org_id, payload.patient_id):
            raise NotFoundError("Patient not found", metadata={"patientId": str(payload.patient_id)})
        obj = await self.repo.create(org_id, **payload.model_dump())
        await self.session.commit()
        return obj

    async def get(self, org_id: uuid.UUID, intervention_id: uuid.UUID):
        return await self.repo.get(org_id, intervention_id)

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None):
        return await self.repo.list(org_id, patient_id)

    @service_operation("interventions.update")
    async def update(self, org_id: uuid.UUID, intervention_id: uuid.UUID, payload: InterventionUpdate):
        obj = await self.repo.update(org_id, intervention_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj

    @service_operation("interventions.delete")
    async def delete(self, org_id: uuid.UUID, intervention_id: uuid.UUID) -> bool:
        ok = await self.repo.soft_delete(org_id, intervention_id)
        if ok:
            await self.session.commit()
        return ok
