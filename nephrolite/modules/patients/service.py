import logging
import uuid
from datetime import date, datetime
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.errors import AlreadyExistsError, InvalidArgumentError, service_operation
from nephrolite.core.paging import encode_cursor, decode_cursor
from nephrolite.modules.audit.service import AuditService
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.patients.schemas import PatientCreate, PatientUpdate
from nephrolite.modules.patients.models import Patient

log = logging.getLogger(__name__)

class PatientService:
    def __init__(self, session: AsyncSession):
        self.repo = PatientRepository(session)
        self.audit = AuditService(session)
        self.session = session

    async def _ensure_nephro_id_free(self, org_id: uuid.UUID, nephro_id: str, patient_id: uuid.UUID | None = None):
        existing = await self.repo.get_by_nephro_id(org_id, nephro_id, include_archived=True)
        if existing and existing.id != patient_id:
            raise AlreadyExistsError(
                f"A patient with Nephro ID {nephro_id} already exists",
                metadata={"nephroId": nephro_id},
            )

    @service_operation("patients.create")
    async def create(self, org_id: uuid.UUID, payload: PatientCreate, actor_id: uuid.UUID | None = None) -> Patient:
        await self._ensure_nephro_id_free(org_id, payload.nephro_id)
        data = payload.model_dump()
        data["registration_date"] = data.get("registration_date") or date.today().isoformat()
        obj = await self.repo.create(org_id, created_by=actor_id, updated_by=actor_id, **data)
        if actor_id:
            await self.audit.record(org_id, actor_id, "CREATE_PATIENT", "patient", str(obj.id),
                                    details={"nephroId": obj.nephro_id})
        await self.session.commit()
        log.info(f"Patient created id={obj.id} nephro_id={obj.nephro_id}")
        return obj

    async def get(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Patient | None:
        return await self.repo.get(org_id, patient_id)

    async def get_by_nephro_id(self, org_id: uuid.UUID, nephro_id: str) -> Patient | None:
        return await self.repo.get_by_nephro_id(org_id, nephro_id)

    async def list(self, org_id: uuid.UUID, limit: int = 50, offset: int = 0):
        return await self.repo.list(org_id, limit, offset)

    async def search_by_name(self, org_id: uuid.UUID, prefix: str, limit: int = 20):
        if not prefix.strip():
            return []
        return await self.repo.search_by_name(org_id, prefix, limit)

    async def page(self, org_id: uuid.UUID, cursor: str | None = None, page_size: int = 20) -> tuple[Sequence[Patient], str | None]:
        after = None
        if cursor:
            data = decode_cursor(cursor)
            try:
                after = (datetime.fromisoformat(data["created_at"]), uuid.UUID(data["id"]))
            except (TypeError, KeyError, ValueError):
                raise InvalidArgumentError("Malformed page cursor")
        rows = await self.repo.page(org_id, after, page_size)
        next_cursor = None
        if len(rows) > page_size:
            rows = rows[:page_size]
            last = rows[-1]
            next_cursor = encode_cursor({"created_at": last.created_at.isoformat(), "id": str(last.id)})
        return rows, next_cursor

    @service_operation("patients.update")
    async def update(self, org_id: uuid.UUID, patient_id: uuid.UUID, payload: PatientUpdate, actor_id: uuid.UUID | None = None) -> Patient | None:
        data = payload.model_dump(exclude_unset=True)
        if data.get("nephro_id"):
            await self._ensure_nephro_id_free(org_id, data["nephro_id"], patient_id)
        changes = {**data, "updated_by": actor_id} if actor_id else data
        obj = await self.repo.update(org_id, patient_id, **changes)
        if obj:
            if actor_id:
                await self.audit.record(org_id, actor_id, "UPDATE_PATIENT", "patient", str(obj.id),
                                        details={"fields": sorted(data)})
            await self.session.commit()
        return obj

    @service_operation("patients.delete")
    async def delete(self, org_id: uuid.UUID, patient_id: uuid.UUID, actor_id: uuid.UUID | None = None) -> bool:
        ok = await self.repo.soft_delete(org_id, patient_id, archived_by=actor_id)
        if ok:
            if actor_id:
                await self.audit.record(org_id, actor_id, "DELETE_PATIENT", "patient", str(patient_id))
            await self.session.commit()
            log.info(f"Patient archived id={patient_id}")
        return ok
