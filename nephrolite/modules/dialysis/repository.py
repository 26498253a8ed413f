import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes
from nephrolite.core.values import merge_json, parse_blood_pressure
from nephrolite.modules.dialysis.models import DialysisSession

def granular_metrics(stats: dict) -> dict:
    systolic, diastolic = parse_blood_pressure(stats.get("bp_before"))
    return {
        "systolic_bp": systolic,
        "diastolic_bp": diastolic,
        "weight_kg": stats.get("weight_before"),
        "uf_volume_ml": stats.get("ultrafiltration"),
    }

def _drop_none(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}

class DialysisSessionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, *, top: dict, stats: dict, details: dict, created_by: uuid.UUID | None = None) -> DialysisSession:
        stats = _drop_none(stats)
        obj = DialysisSession(
            org_id=org_id,
            stats=stats,
            details=_drop_none(details),
            created_by=created_by,
            **top,
            **granular_metrics(stats),
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, session_id: uuid.UUID) -> DialysisSession | None:
        q = select(DialysisSession).where(
            DialysisSession.id == session_id,
            DialysisSession.org_id == org_id,
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, patient_id: uuid.UUID | None = None, limit: int = 200, offset: int = 0) -> Sequence[DialysisSession]:
        q = select(DialysisSession).where(DialysisSession.org_id == org_id)
        if patient_id:
            q = q.where(DialysisSession.patient_id == patient_id)
        q = q.order_by(DialysisSession.date_of_session.desc(), DialysisSession.created_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, session_id: uuid.UUID, *, top: dict, stats: dict, details: dict) -> DialysisSession | None:
        obj = await self.get(org_id, session_id)
        if not obj:
            return None
        apply_changes(obj, top)
        if stats:
            obj.stats = merge_json(obj.stats, stats)
            for k, v in granular_metrics(obj.stats).items():
                setattr(obj, k, v)
        if details:
            obj.details = merge_json(obj.details, details)
        await self.session.flush()
        return obj

    async def delete(self, org_id: uuid.UUID, session_id: uuid.UUID) -> bool:
        obj = await self.get(org_id, session_id)
        if not obj:
            return False
        await self.session.delete(obj)
        await self.session.flush()
        return True
