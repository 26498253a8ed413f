import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.casing import to_camel_keys
from nephrolite.core.errors import service_operation
from nephrolite.modules.templates.repository import TemplateRepository, MasterDiagnosisRepository
from nephrolite.modules.templates.schemas import TemplateIn, MasterDiagnosisIn

class TemplateService:
    def __init__(self, session: AsyncSession):
        self.repo = TemplateRepository(session)
        self.session = session

    async def get_templates(self, org_id: uuid.UUID, user_id: uuid.UUID) -> dict[str, dict]:
        """Templates keyed by name, content camelCased with the name and type folded back in."""
        out = {}
        for row in await self.repo.list_for_user(org_id, user_id):
            out[row.name] = {
                **to_camel_keys(row.content or {}),
                "templateName": row.name,
                "templateType": row.template_type,
            }
        return out

    @service_operation("templates.save")
    async def save_template(self, org_id: uuid.UUID, user_id: uuid.UUID, payload: TemplateIn):
        content = payload.model_dump(exclude={"template_name", "template_type"})
        obj = await self.repo.upsert(org_id, user_id, payload.template_name, payload.template_type, content)
        await self.session.commit()
        return obj

    @service_operation("templates.delete")
    async def delete_template(self, org_id: uuid.UUID, user_id: uuid.UUID, name: str) -> bool:
        ok = await self.repo.delete(org_id, user_id, name)
        await self.session.commit()
        return ok

class MasterDiagnosisService:
    def __init__(self, session: AsyncSession):
        self.repo = MasterDiagnosisRepository(session)
        self.session = session

    async def list(self, org_id: uuid.UUID):
        return await self.repo.list(org_id)

    @service_operation("master_diagnoses.upsert")
    async def upsert(self, org_id: uuid.UUID, payload: MasterDiagnosisIn):
        data = payload.model_dump()
        obj = await self.repo.upsert(org_id, data["clinical_diagnosis"], data["icd_mappings"])
        await self.session.commit()
        return obj

    @service_operation("master_diagnoses.delete")
    async def delete(self, org_id: uuid.UUID, diagnosis_id: uuid.UUID) -> bool:
        ok = await self.repo.delete(org_id, diagnosis_id)
        await self.session.commit()
        return ok
