import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, Text
from nephrolite.core.base import Base, TimestampedTenantMixin

class BackupLog(Base, TimestampedTenantMixin):
    __tablename__ = "backup_logs"

    backup_type: Mapped[str] = mapped_column(String(16))  # scheduled | manual
    status: Mapped[str] = mapped_column(String(16), default="started", index=True)  # started | completed | failed
    operation_name: Mapped[str] = mapped_column(String(120))
    collections: Mapped[list] = mapped_column(JSON, default=list)
    bucket: Mapped[str | None] = mapped_column(String(512), nullable=True)
    object_key: Mapped[str | None] = mapped_column(String(512), nullable=True)
    triggered_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    row_counts: Mapped[dict] = mapped_column(JSON, default=dict)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
