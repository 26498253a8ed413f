import uuid
from datetime import datetime
from typing import Annotated
from pydantic import StringConstraints
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import InterventionType
from nephrolite.core.values import DATE_PATTERN

DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]

class Attachment(CamelModel):
    name: str
    url: str

class InterventionCreate(CamelModel):
    patient_id: uuid.UUID
    date: DateStr
    type: InterventionType
    details: dict[str, str | bool] = {}
    notes: str | None = None
    complications: str | None = None
    attachments: list[Attachment] = []

class InterventionUpdate(CamelModel):
    date: DateStr | None = None
    type: InterventionType | None = None
    details: dict[str, str | bool] | None = None
    notes: str | None = None
    complications: str | None = None
    attachments: list[Attachment] | None = None

class InterventionOut(CamelModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    date: str
    type: str
    details: dict
    notes: str | None = None
    complications: str | None = None
    attachments: list[Attachment]
    created_at: datetime
    updated_at: datetime
