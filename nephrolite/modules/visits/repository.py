import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes, utcnow
from nephrolite.core.values import parse_blood_pressure
from nephrolite.modules.visits.models import Visit

JSON_FIELDS = ("clinical_data", "vital_signs")

def blood_pressure_columns(vital_signs: dict | None, clinical_data: dict | None = None) -> dict:
    systolic, diastolic = parse_blood_pressure((vital_signs or {}).get("blood_pressure"))
    if systolic is None and diastolic is None and clinical_data:
        s, d = clinical_data.get("systolic_bp"), clinical_data.get("diastolic_bp")
        if s and d:
            systolic, diastolic = parse_blood_pressure(f"{s}/{d}")
    return {"systolic_bp": systolic, "diastolic_bp": diastolic}

class VisitRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Visit:
        data.update(blood_pressure_columns(data.get("vital_signs"), data.get("clinical_data")))
        obj = Visit(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, visit_id: uuid.UUID) -> Visit | None:
        q = select(Visit).where(
            Visit.id == visit_id,
            Visit.org_id == org_id,
            Visit.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None, limit: int = 200, offset: int = 0) -> Sequence[Visit]:
        q = select(Visit).where(Visit.org_id == org_id, Visit.deleted_at.is_(None))
        if patient_id:
            q = q.where(Visit.patient_id == patient_id)
        q = q.order_by(Visit.date.desc(), Visit.created_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def recent(self, org_id: uuid.UUID, count: int = 10) -> Sequence[Visit]:
        return await self.list(org_id, limit=count)

    async def update(self, org_id: uuid.UUID, visit_id: uuid.UUID, **data) -> Visit | None:
        obj = await self.get(org_id, visit_id)
        if not obj:
            return None
        apply_changes(obj, data, JSON_FIELDS)
        if "vital_signs" in data or "clinical_data" in data:
            for k, v in blood_pressure_columns(obj.vital_signs, obj.clinical_data).items():
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, org_id: uuid.UUID, visit_id: uuid.UUID) -> bool:
        obj = await self.get(org_id, visit_id)
        if not obj:
            return False
        obj.deleted_at = utcnow()
        await self.session.flush()
        return True
