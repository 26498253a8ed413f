import uuid
from typing import Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes, utcnow
from nephrolite.modules.investigations.models import InvestigationRecord, InvestigationMaster, InvestigationPanel

class InvestigationRecordRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> InvestigationRecord:
        obj = InvestigationRecord(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, record_id: uuid.UUID) -> InvestigationRecord | None:
        q = select(InvestigationRecord).where(
            InvestigationRecord.id == record_id,
            InvestigationRecord.org_id == org_id,
            InvestigationRecord.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None) -> Sequence[InvestigationRecord]:
        q = select(InvestigationRecord).where(
            InvestigationRecord.org_id == org_id,
            InvestigationRecord.deleted_at.is_(None),
        )
        if patient_id:
            q = q.where(InvestigationRecord.patient_id == patient_id)
        q = q.order_by(InvestigationRecord.date.desc(), InvestigationRecord.created_at.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, record_id: uuid.UUID, **data) -> InvestigationRecord | None:
        obj = await self.get(org_id, record_id)
        if not obj:
            return None
        # only the provided fields change; tests are replaced as a whole
        apply_changes(obj, data)
        await self.session.flush()
        return obj

    async def soft_delete(self, org_id: uuid.UUID, record_id: uuid.UUID) -> bool:
        obj = await self.get(org_id, record_id)
        if not obj:
            return False
        obj.deleted_at = utcnow()
        await self.session.flush()
        return True

class MasterDataRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_tests(self, org_id: uuid.UUID, group_name: str | None = None) -> Sequence[InvestigationMaster]:
        q = select(InvestigationMaster).where(InvestigationMaster.org_id == org_id)
        if group_name:
            q = q.where(InvestigationMaster.group_name == group_name)
        res = await self.session.execute(q.order_by(InvestigationMaster.group_name, InvestigationMaster.code))
        return res.scalars().all()

    async def upsert_test(self, org_id: uuid.UUID, code: str, **data) -> InvestigationMaster:
        res = await self.session.execute(select(InvestigationMaster).where(
            InvestigationMaster.org_id == org_id, InvestigationMaster.code == code,
        ))
        obj = res.scalar_one_or_none()
        if obj is None:
            obj = InvestigationMaster(org_id=org_id, code=code, **data)
            self.session.add(obj)
        else:
            for k, v in data.items():
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete_test(self, org_id: uuid.UUID, code: str) -> bool:
        res = await self.session.execute(delete(InvestigationMaster).where(
            InvestigationMaster.org_id == org_id, InvestigationMaster.code == code,
        ))
        return res.rowcount > 0

    async def list_panels(self, org_id: uuid.UUID) -> Sequence[InvestigationPanel]:
        q = select(InvestigationPanel).where(InvestigationPanel.org_id == org_id).order_by(
            InvestigationPanel.group_name, InvestigationPanel.name,
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def upsert_panel(self, org_id: uuid.UUID, name: str, **data) -> InvestigationPanel:
        res = await self.session.execute(select(InvestigationPanel).where(
            InvestigationPanel.org_id == org_id, InvestigationPanel.name == name,
        ))
        obj = res.scalar_one_or_none()
        if obj is None:
            obj = InvestigationPanel(org_id=org_id, name=name, **data)
            self.session.add(obj)
        else:
            for k, v in data.items():
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete_panel(self, org_id: uuid.UUID, panel_id: uuid.UUID) -> bool:
        res = await self.session.execute(delete(InvestigationPanel).where(
            InvestigationPanel.org_id == org_id, InvestigationPanel.id == panel_id,
        ))
        return res.rowcount > 0
