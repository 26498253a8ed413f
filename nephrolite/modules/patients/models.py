import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, UniqueConstraint
from nephrolite.core.base import Base, TimestampedTenantMixin

class Patient(Base, TimestampedTenantMixin):
    __tablename__ = "patients"
    __table_args__ = (UniqueConstraint("org_id", "nephro_id", name="uq_patients_org_nephro_id"),)

    nephro_id: Mapped[str] = mapped_column(String(64), index=True)
    first_name: Mapped[str] = mapped_column(String(100), index=True)
    last_name: Mapped[str] = mapped_column(String(100), index=True)
    dob: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    gender: Mapped[str] = mapped_column(String(8))
    contact: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    # nested sub-objects, stored with snake_case keys
    address: Mapped[dict] = mapped_column(JSON, default=dict)
    guardian: Mapped[dict] = mapped_column(JSON, default=dict)
    clinical_profile: Mapped[dict] = mapped_column(JSON, default=dict)

    registration_date: Mapped[str] = mapped_column(String(10))
    service_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    service_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rank: Mapped[str | None] = mapped_column(String(64), nullable=True)
    unit_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    formation: Mapped[str | None] = mapped_column(String(100), nullable=True)

    patient_status: Mapped[str] = mapped_column(String(16), default="OPD")
    next_appointment_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_tracked: Mapped[bool] = mapped_column(default=False)
    residence_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    last_dialysis_date: Mapped[str | None] = mapped_column(String(10), nullable=True)

    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    archived_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
