import uuid
from datetime import datetime
from typing import Annotated, Any
from pydantic import Field, StringConstraints, model_validator
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import AccessType, DialysisType, SessionStatus
from nephrolite.core.values import DATE_PATTERN

DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]
Positive = Annotated[float, Field(gt=0)]

MAX_SESSION_MINUTES = 600

# columns stored on the row itself
TOP_LEVEL_FIELDS = ("patient_id", "date_of_session", "type_of_dialysis", "duration", "status")
# machine and fluid readings kept together in the stats JSON column
STATS_FIELDS = (
    "dry_weight", "ultrafiltration", "weight_before", "weight_after",
    "bp_before", "bp_during", "bp_peak", "bp_nadir", "bp_after",
    "blood_flow_rate", "dialysate_flow_rate",
)

class Duration(CamelModel):
    hours: int = Field(0, ge=0)
    minutes: int = Field(0, ge=0, le=59)

    @model_validator(mode="after")
    def _within_limit(self):
        if self.hours * 60 + self.minutes > MAX_SESSION_MINUTES:
            raise ValueError(f"session duration cannot exceed {MAX_SESSION_MINUTES} minutes")
        return self

class SessionReadings(CamelModel):
    dry_weight: Positive | None = None
    ultrafiltration: Positive | None = None
    weight_before: Positive | None = None
    weight_after: Positive | None = None
    bp_before: str | None = None
    bp_during: str | None = None
    bp_peak: str | None = None
    bp_nadir: str | None = None
    bp_after: str | None = None
    blood_flow_rate: Positive | None = None
    dialysate_flow_rate: Positive | None = None

class SessionDetails(CamelModel):
    indication_of_dialysis: list[str] | None = None
    native_kidney_disease: list[str] | None = None
    comorbidities: list[str] | None = None
    dialysis_modality: str | None = None
    previous_dialysis_modality: DialysisType | None = None
    date_of_dialysis_initiation: DateStr | None = None
    location_of_session: str | None = None
    facility: str | None = None
    fluid_removal_tolerance: bool | None = None
    complications_flag: bool | None = None
    complications_desc: list[str] | None = None
    complications_management_desc: list[str] | None = None
    pd_fluid_type: str | None = None
    pd_fluid_volume: Positive | None = None
    access_type: AccessType | None = None
    vascular_access_location: str | None = None
    date_of_access_creation: DateStr | None = None
    anticoagulation: str | None = None
    dialyzer_type: str | None = None
    dialyzer_surface_area: Positive | None = None
    medications_administered: str | None = None
    drug_allergies: str | None = None
    vascular_access_condition: str | None = None
    vascular_interventions_performed: str | None = None
    access_related_complications: str | None = None
    any_concerns_for_doctor: str | None = None
    next_scheduled_session: DateStr | None = None
    dialysis_adherence: float | None = Field(None, ge=0, le=100)
    notes: str | None = None

class DialysisSessionCreate(SessionReadings, SessionDetails):
    patient_id: uuid.UUID
    date_of_session: DateStr
    type_of_dialysis: DialysisType
    duration: Duration = Field(default_factory=Duration)
    status: SessionStatus = "Active"

class DialysisSessionUpdate(SessionReadings, SessionDetails):
    date_of_session: DateStr | None = None
    type_of_dialysis: DialysisType | None = None
    duration: Duration | None = None
    status: SessionStatus | None = None

class DialysisSessionOut(SessionReadings, SessionDetails):
    """A session with stats and details flattened back to the top level."""
    id: uuid.UUID
    patient_id: uuid.UUID
    date_of_session: str
    type_of_dialysis: str
    duration: Duration
    status: str
    systolic_bp: int | None = None
    diastolic_bp: int | None = None
    weight_kg: float | None = None
    uf_volume_ml: float | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "DialysisSessionOut":
        data = {**(row.details or {}), **(row.stats or {})}
        data.update(
            id=row.id,
            patient_id=row.patient_id,
            date_of_session=row.date_of_session,
            type_of_dialysis=row.type_of_dialysis,
            duration=row.duration or {},
            status=row.status,
            systolic_bp=row.systolic_bp,
            diastolic_bp=row.diastolic_bp,
            weight_kg=row.weight_kg,
            uf_volume_ml=row.uf_volume_ml,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
        return cls.model_validate(data)

def split_session_fields(data: dict) -> tuple[dict, dict, dict]:
    """Partition flat session fields into (top-level columns, stats, details)."""
    top, stats, details = {}, {}, {}
    for k, v in data.items():
        if k in TOP_LEVEL_FIELDS:
            top[k] = v
        elif k in STATS_FIELDS:
            stats[k] = v
        else:
            details[k] = v
    return top, stats, details
