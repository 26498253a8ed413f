import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey, Text
from nephrolite.core.base import Base, TimestampedTenantMixin

class Appointment(Base, TimestampedTenantMixin):
    __tablename__ = "appointments"

    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patients.id"), index=True)
    # denormalized so the day list renders without a join
    patient_name: Mapped[str] = mapped_column(String(200))
    date: Mapped[str] = mapped_column(String(10), index=True)  # YYYY-MM-DD
    time: Mapped[str] = mapped_column(String(5))  # HH:MM
    type: Mapped[str] = mapped_column(String(48))
    doctor_name: Mapped[str] = mapped_column(String(120))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Scheduled | Completed | Cancelled | Waiting | Not Showed | Admitted | Now Serving
    status: Mapped[str] = mapped_column(String(16), default="Scheduled")
