import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, ForeignKey, Text
from nephrolite.core.base import Base, TimestampedTenantMixin

class Visit(Base, TimestampedTenantMixin):
    __tablename__ = "visits"

    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patients.id"), index=True)
    date: Mapped[str] = mapped_column(String(10), index=True)
    visit_type: Mapped[str] = mapped_column(String(32))
    visit_remark: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    chief_complaint: Mapped[str | None] = mapped_column(String(500), nullable=True)
    diagnoses: Mapped[list] = mapped_column(JSON, default=list)
    clinical_data: Mapped[dict] = mapped_column(JSON, default=dict)
    vital_signs: Mapped[dict] = mapped_column(JSON, default=dict)
    # parsed from vital_signs.blood_pressure for trend queries
    systolic_bp: Mapped[int | None] = mapped_column(nullable=True)
    diastolic_bp: Mapped[int | None] = mapped_column(nullable=True)
    follow_up_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    follow_up_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
