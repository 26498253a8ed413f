import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, TIMESTAMP, text, JSON
from nephrolite.core.base import Base, TimestampedTenantMixin, utcnow

class AuditEvent(Base, TimestampedTenantMixin):
    __tablename__ = "audit_events"

    actor_user_id: Mapped[uuid.UUID] = mapped_column()
    # CREATE_PATIENT | UPDATE_PATIENT | DELETE_PATIENT | CREATE_DIALYSIS_SESSION | CREATE_VISIT | TRIGGER_BACKUP
    action: Mapped[str] = mapped_column(String(48))
    resource_type: Mapped[str] = mapped_column(String(48))  # patient | visit | dialysis_session | backup
    resource_id: Mapped[str] = mapped_column(String(64))     # UUID as string, or "-"
    success: Mapped[bool] = mapped_column(default=True)
    details: Mapped[dict] = mapped_column(JSON, default=dict)
    occurred_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=text("CURRENT_TIMESTAMP"), default=utcnow)
