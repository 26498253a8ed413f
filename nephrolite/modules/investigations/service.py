import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.constants import INVESTIGATION_MASTER_LIST, INVESTIGATION_PANELS
from nephrolite.core.errors import InvalidArgumentError, NotFoundError, service_operation
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.investigations.repository import InvestigationRecordRepository, MasterDataRepository
from nephrolite.modules.investigations.schemas import (
    InvestigationRecordCreate, InvestigationRecordUpdate, InvestigationMasterIn, InvestigationPanelIn,
)

log = logging.getLogger(__name__)

class InvestigationService:
    def __init__(self, session: AsyncSession):
        self.repo = InvestigationRecordRepository(session)
        self.patients = PatientRepository(session)
        self.session = session

    @service_operation("investigations.create")
    async def create(self, org_id: uuid.UUID, payload: InvestigationRecordCreate):
        if not await self.patients.get(org_id, payload.patient_id):
            raise NotFoundError("Patient not found", metadata={"patientId": str(payload.patient_id)})
        obj = await self.repo.create(org_id, **payload.model_dump())
        await self.session.commit()
        return obj

    async def get(self, org_id: uuid.UUID, record_id: uuid.UUID):
        return await self.repo.get(org_id, record_id)

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None):
        return await self.repo.list(org_id, patient_id)

    @service_operation("investigations.update")
    async def update(self, org_id: uuid.UUID, record_id: uuid.UUID, payload: InvestigationRecordUpdate):
        obj = await self.repo.update(org_id, record_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj

    @service_operation("investigations.delete")
    async def delete(self, org_id: uuid.UUID, record_id: uuid.UUID) -> bool:
        ok = await self.repo.soft_delete(org_id, record_id)
        if ok:
            await self.session.commit()
        return ok

class MasterDataService:
    def __init__(self, session: AsyncSession):
        self.repo = MasterDataRepository(session)
        self.session = session

    async def list_tests(self, org_id: uuid.UUID, group_name: str | None = None):
        return await self.repo.list_tests(org_id, group_name)

    @service_operation("master_data.upsert_test")
    async def upsert_test(self, org_id: uuid.UUID, payload: InvestigationMasterIn):
        data = payload.model_dump()
        obj = await self.repo.upsert_test(org_id, data.pop("code"), **data)
        await self.session.commit()
        return obj

    @service_operation("master_data.delete_test")
    async def delete_test(self, org_id: uuid.UUID, code: str) -> bool:
        panels = [p.name for p in await self.repo.list_panels(org_id) if code in (p.test_codes or [])]
        if panels:
            raise InvalidArgumentError("Test is still used by panels", metadata={"panels": panels})
        ok = await self.repo.delete_test(org_id, code)
        await self.session.commit()
        return ok

    async def list_panels(self, org_id: uuid.UUID):
        return await self.repo.list_panels(org_id)

    @service_operation("master_data.upsert_panel")
    async def upsert_panel(self, org_id: uuid.UUID, payload: InvestigationPanelIn):
        known = {t.code for t in await self.repo.list_tests(org_id)}
        unknown = [c for c in payload.test_codes if c not in known]
        if unknown:
            raise InvalidArgumentError("Panel references unknown tests", metadata={"unknown": unknown})
        data = payload.model_dump()
        obj = await self.repo.upsert_panel(org_id, data.pop("name"), **data)
        await self.session.commit()
        return obj

    @service_operation("master_data.delete_panel")
    async def delete_panel(self, org_id: uuid.UUID, panel_id: uuid.UUID) -> bool:
        ok = await self.repo.delete_panel(org_id, panel_id)
        await self.session.commit()
        return ok

    @service_operation("master_data.seed")
    async def seed_defaults(self, org_id: uuid.UUID) -> dict:
        for code, name, group in INVESTIGATION_MASTER_LIST:
            await self.repo.upsert_test(org_id, code, name=name, group_name=group)
        for name, group, codes in INVESTIGATION_PANELS:
            await self.repo.upsert_panel(org_id, name, group_name=group, test_codes=list(codes))
        await self.session.commit()
        log.info(f"Seeded {len(INVESTIGATION_MASTER_LIST)} tests and {len(INVESTIGATION_PANELS)} panels for org {org_id}")
        return {"tests": len(INVESTIGATION_MASTER_LIST), "panels": len(INVESTIGATION_PANELS)}
