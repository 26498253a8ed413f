import uuid
from typing import Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.modules.templates.models import DiagnosisTemplate, MasterDiagnosis

class TemplateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(self, org_id: uuid.UUID, user_id: uuid.UUID) -> Sequence[DiagnosisTemplate]:
        q = select(DiagnosisTemplate).where(
            DiagnosisTemplate.org_id == org_id, DiagnosisTemplate.user_id == user_id,
        ).order_by(DiagnosisTemplate.name)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def upsert(self, org_id: uuid.UUID, user_id: uuid.UUID, name: str, template_type: str, content: dict) -> DiagnosisTemplate:
        res = await self.session.execute(select(DiagnosisTemplate).where(
            DiagnosisTemplate.org_id == org_id,
            DiagnosisTemplate.user_id == user_id,
            DiagnosisTemplate.name == name,
        ))
        obj = res.scalar_one_or_none()
        if obj is None:
            obj = DiagnosisTemplate(org_id=org_id, user_id=user_id, name=name, template_type=template_type, content=content)
            self.session.add(obj)
        else:
            obj.template_type = template_type
            obj.content = content
        await self.session.flush()
        return obj

    async def delete(self, org_id: uuid.UUID, user_id: uuid.UUID, name: str) -> bool:
        res = await self.session.execute(delete(DiagnosisTemplate).where(
            DiagnosisTemplate.org_id == org_id,
            DiagnosisTemplate.user_id == user_id,
            DiagnosisTemplate.name == name,
        ))
        return res.rowcount > 0

class MasterDiagnosisRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self, org_id: uuid.UUID) -> Sequence[MasterDiagnosis]:
        q = select(MasterDiagnosis).where(MasterDiagnosis.org_id == org_id).order_by(MasterDiagnosis.clinical_diagnosis)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def upsert(self, org_id: uuid.UUID, clinical_diagnosis: str, icd_mappings: list) -> MasterDiagnosis:
        res = await self.session.execute(select(MasterDiagnosis).where(
            MasterDiagnosis.org_id == org_id, MasterDiagnosis.clinical_diagnosis == clinical_diagnosis,
        ))
        obj = res.scalar_one_or_none()
        if obj is None:
            obj = MasterDiagnosis(org_id=org_id, clinical_diagnosis=clinical_diagnosis, icd_mappings=icd_mappings)
            self.session.add(obj)
        else:
            obj.icd_mappings = icd_mappings
        await self.session.flush()
        return obj

    async def delete(self, org_id: uuid.UUID, diagnosis_id: uuid.UUID) -> bool:
        res = await self.session.execute(delete(MasterDiagnosis).where(
            MasterDiagnosis.org_id == org_id, MasterDiagnosis.id == diagnosis_id,
        ))
        return res.rowcount > 0
