import uuid
from datetime import datetime
from typing import Annotated
from pydantic import Field, StringConstraints
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import AppointmentStatus, AppointmentType
from nephrolite.core.values import DATE_PATTERN, TIME_PATTERN

DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]
TimeStr = Annotated[str, StringConstraints(pattern=TIME_PATTERN)]

class AppointmentCreate(CamelModel):
    patient_id: uuid.UUID
    patient_name: str | None = None  # filled from the patient record when omitted
    date: DateStr
    time: TimeStr
    type: AppointmentType
    doctor_name: str = Field(..., min_length=1)
    notes: str | None = None
    status: AppointmentStatus = "Scheduled"

class AppointmentUpdate(CamelModel):
    date: DateStr | None = None
    time: TimeStr | None = None
    type: AppointmentType | None = None
    doctor_name: str | None = None
    notes: str | None = None
    status: AppointmentStatus | None = None

class AppointmentStatusChange(CamelModel):
    status: AppointmentStatus

class AppointmentOut(CamelModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    patient_name: str
    date: str
    time: str
    type: str
    doctor_name: str
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
