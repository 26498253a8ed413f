import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, UniqueConstraint
from nephrolite.core.base import Base, TimestampedTenantMixin

class DiagnosisTemplate(Base, TimestampedTenantMixin):
    __tablename__ = "diagnosis_templates"
    __table_args__ = (UniqueConstraint("org_id", "user_id", "name", name="uq_diagnosis_templates_owner_name"),)

    user_id: Mapped[uuid.UUID] = mapped_column(index=True)
    name: Mapped[str] = mapped_column(String(200))
    template_type: Mapped[str] = mapped_column(String(32))
    content: Mapped[dict] = mapped_column(JSON, default=dict)

class MasterDiagnosis(Base, TimestampedTenantMixin):
    __tablename__ = "master_diagnoses"
    __table_args__ = (UniqueConstraint("org_id", "clinical_diagnosis", name="uq_master_diagnoses_name"),)

    clinical_diagnosis: Mapped[str] = mapped_column(String(300))
    icd_mappings: Mapped[list] = mapped_column(JSON, default=list)
