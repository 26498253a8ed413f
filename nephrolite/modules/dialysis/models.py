import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, ForeignKey, Float
from nephrolite.core.base import Base, TimestampedTenantMixin

class DialysisSession(Base, TimestampedTenantMixin):
    __tablename__ = "dialysis_sessions"

    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patients.id"), index=True)
    date_of_session: Mapped[str] = mapped_column(String(10), index=True)
    type_of_dialysis: Mapped[str] = mapped_column(String(32))
    duration: Mapped[dict] = mapped_column(JSON, default=dict)  # {"hours": .., "minutes": ..}
    status: Mapped[str] = mapped_column(String(16), default="Active")

    # granular metrics derived from stats, for querying and trends
    systolic_bp: Mapped[int | None] = mapped_column(nullable=True)
    diastolic_bp: Mapped[int | None] = mapped_column(nullable=True)
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    uf_volume_ml: Mapped[float | None] = mapped_column(Float, nullable=True)

    stats: Mapped[dict] = mapped_column(JSON, default=dict)
    details: Mapped[dict] = mapped_column(JSON, default=dict)
    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
