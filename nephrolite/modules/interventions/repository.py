import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes, utcnow
from nephrolite.modules.interventions.models import Intervention

class InterventionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Intervention:
        obj = Intervention(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, intervention_id: uuid.UUID) -> Intervention | None:
        q = select(Intervention).where(
            Intervention.id == intervention_id,
            Intervention.org_id == org_id,
            Intervention.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None) -> Sequence[Intervention]:
        q = select(Intervention).where(Intervention.org_id == org_id, Intervention.deleted_at.is_(None))
        if patient_id:
            q = q.where(Intervention.patient_id == patient_id)
        res = await self.session.execute(q.order_by(Intervention.created_at.desc()))
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, intervention_id: uuid.UUID, **data) -> Intervention | None:
        obj = await self.get(org_id, intervention_id)
        if not obj:
            return None
        apply_changes(obj, data, ("details",))
        await self.session.flush()
        return obj

    async def soft_delete(self, org_id: uuid.UUID, intervention_id: uuid.UUID) -> bool:
        obj = await self.get(org_id, intervention_id)
        if not obj:
            return False
        obj.deleted_at = utcnow()
        await self.session.flush()
        return True
