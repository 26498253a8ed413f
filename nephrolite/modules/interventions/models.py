import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, ForeignKey, Text
from nephrolite.core.base import Base, TimestampedTenantMixin

class Intervention(Base, TimestampedTenantMixin):
    __tablename__ = "interventions"

    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patients.id"), index=True)
    date: Mapped[str] = mapped_column(String(10))
    type: Mapped[str] = mapped_column(String(48))
    details: Mapped[dict] = mapped_column(JSON, default=dict)  # type-specific fields (catheter site, fistula type, ...)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    complications: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachments: Mapped[list] = mapped_column(JSON, default=list)
