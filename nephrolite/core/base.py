import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import DeclarativeBase, declared_attr, Mapped, mapped_column
from sqlalchemy import text, TIMESTAMP
from nephrolite.core.values import merge_json

class Base(DeclarativeBase):
    pass

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TimestampedTenantMixin:
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(default=uuid.UUID(int=1), index=True)  # default practice for local dev
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("CURRENT_TIMESTAMP"), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("CURRENT_TIMESTAMP"), default=utcnow, onupdate=utcnow
    )
    # archive flag: a non-null value means the row is soft-deleted
    deleted_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(default=1)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

def row_to_dict(row: Base) -> dict:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}

def apply_changes(obj: Base, data: dict, merge_fields: tuple[str, ...] = ()) -> None:
    """Copy the fields a client sent onto a row.

    An explicit ``None`` clears a nullable column and is ignored for a required
    one. JSON columns named in ``merge_fields`` are merged key by key.
    """
    columns = obj.__table__.c
    for k, v in data.items():
        if v is None:
            if k in columns and columns[k].nullable:
                setattr(obj, k, None)
            continue
        if k in merge_fields:
            v = merge_json(getattr(obj, k), v)
        setattr(obj, k, v)
