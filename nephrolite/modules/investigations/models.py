import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, ForeignKey, Text, UniqueConstraint
from nephrolite.core.base import Base, TimestampedTenantMixin

class InvestigationRecord(Base, TimestampedTenantMixin):
    __tablename__ = "investigation_records"

    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patients.id"), index=True)
    date: Mapped[str] = mapped_column(String(10), index=True)
    tests: Mapped[list] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

class InvestigationMaster(Base, TimestampedTenantMixin):
    __tablename__ = "investigation_master"
    __table_args__ = (UniqueConstraint("org_id", "code", name="uq_investigation_master_code"),)

    code: Mapped[str] = mapped_column(String(32))  # e.g. hem_001
    name: Mapped[str] = mapped_column(String(200))
    group_name: Mapped[str] = mapped_column(String(64))
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    normal_range: Mapped[str | None] = mapped_column(String(64), nullable=True)
    result_type: Mapped[str] = mapped_column(String(16), default="numeric")
    options: Mapped[list] = mapped_column(JSON, default=list)

class InvestigationPanel(Base, TimestampedTenantMixin):
    __tablename__ = "investigation_panels"
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_investigation_panel_name"),)

    name: Mapped[str] = mapped_column(String(200))
    group_name: Mapped[str] = mapped_column(String(64))
    test_codes: Mapped[list] = mapped_column(JSON, default=list)
