import uuid
from datetime import datetime
from typing import Sequence
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import apply_changes, utcnow
from nephrolite.modules.patients.models import Patient

# sub-objects merged key-by-key on update instead of replaced
JSON_FIELDS = ("address", "guardian", "clinical_profile")

def _like_prefix(prefix: str) -> str:
    escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"{escaped}%"

class PatientRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Patient:
        obj = Patient(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Patient | None:
        q = select(Patient).where(
            Patient.id == patient_id,
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_nephro_id(self, org_id: uuid.UUID, nephro_id: str, *, include_archived: bool = False) -> Patient | None:
        q = select(Patient).where(Patient.org_id == org_id, Patient.nephro_id == nephro_id)
        if not include_archived:
            q = q.where(Patient.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalars().first()

    async def list(self, org_id: uuid.UUID, limit: int = 50, offset: int = 0) -> Sequence[Patient]:
        q = select(Patient).where(
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
        ).order_by(Patient.created_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def search_by_name(self, org_id: uuid.UUID, prefix: str, limit: int = 20) -> Sequence[Patient]:
        pattern = _like_prefix(prefix.strip())
        full_name = Patient.first_name + " " + Patient.last_name
        q = select(Patient).where(
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
            or_(
                Patient.first_name.ilike(pattern, escape="\\"),
                Patient.last_name.ilike(pattern, escape="\\"),
                full_name.ilike(pattern, escape="\\"),
            ),
        ).order_by(Patient.first_name, Patient.last_name).limit(limit)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def page(self, org_id: uuid.UUID, after: tuple[datetime, uuid.UUID] | None, page_size: int = 20) -> Sequence[Patient]:
        """Keyset page ordered newest first; fetches one extra row to detect a next page."""
        q = select(Patient).where(
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
        )
        if after is not None:
            created_at, last_id = after
            q = q.where(or_(
                Patient.created_at < created_at,
                and_(Patient.created_at == created_at, Patient.id < last_id),
            ))
        q = q.order_by(Patient.created_at.desc(), Patient.id.desc()).limit(page_size + 1)
        res = await self.session.execute(q)
        return list(res.scalars().all())

    async def update(self, org_id: uuid.UUID, patient_id: uuid.UUID, **data) -> Patient | None:
        obj = await self.get(org_id, patient_id)
        if not obj:
            return None
        apply_changes(obj, data, JSON_FIELDS)
        await self.session.flush()
        return obj

    async def soft_delete(self, org_id: uuid.UUID, patient_id: uuid.UUID, archived_by: uuid.UUID | None = None) -> bool:
        obj = await self.get(org_id, patient_id)
        if not obj:
            return False
        obj.deleted_at = utcnow()
        obj.archived_by = archived_by
        await self.session.flush()
        return True
