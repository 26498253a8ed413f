import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from nephrolite.core.base import apply_changes, utcnow
from nephrolite.modules.appointments.models import Appointment

class AppointmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Appointment:
        obj = Appointment(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, appt_id: uuid.UUID) -> Appointment | None:
        q = select(Appointment).where(
            and_(Appointment.id == appt_id,
                 Appointment.org_id == org_id,
                 Appointment.deleted_at.is_(None))
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, *, patient_id: uuid.UUID | None = None, status: str | None = None,
                   limit: int = 200, offset: int = 0) -> Sequence[Appointment]:
        cond = [Appointment.org_id == org_id, Appointment.deleted_at.is_(None)]
        if status:
            cond.append(Appointment.status == status)
        if patient_id:
            cond.append(Appointment.patient_id == patient_id)
        q = select(Appointment).where(and_(*cond)).order_by(
            Appointment.date.desc(), Appointment.time.desc()
        ).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def by_date(self, org_id: uuid.UUID, day: str) -> Sequence[Appointment]:
        q = select(Appointment).where(and_(
            Appointment.org_id == org_id,
            Appointment.deleted_at.is_(None),
            Appointment.date == day,
        )).order_by(Appointment.time.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, appt_id: uuid.UUID, **data) -> Appointment | None:
        obj = await self.get(org_id, appt_id)
        if not obj:
            return None
        apply_changes(obj, data)
        await self.session.flush()
        return obj

    async def soft_delete(self, org_id: uuid.UUID, appt_id: uuid.UUID) -> bool:
        obj = await self.get(org_id, appt_id)
        if not obj:
            return False
        obj.deleted_at = utcnow()
        await self.session.flush()
        return True
