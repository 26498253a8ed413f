import uuid
from datetime import datetime
from typing import Annotated
from pydantic import Field, StringConstraints
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import VisitType, DiagnosisKind, PatientGroup
from nephrolite.core.values import DATE_PATTERN

DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]

class Diagnosis(CamelModel):
    id: str | None = None
    name: str = Field(..., min_length=1)
    code: str | None = None
    icd_code: str | None = None
    icd_name: str | None = None
    type: DiagnosisKind | None = None

class Medication(CamelModel):
    id: str | None = None
    name: str = Field(..., min_length=1)
    dosage: str | None = None
    frequency: str | None = None
    duration: str | None = None
    instructions: str | None = None

class VitalSigns(CamelModel):
    blood_pressure: str | None = None
    pulse: float | None = Field(None, gt=0)
    temperature: float | None = Field(None, gt=0)
    respiratory_rate: float | None = Field(None, gt=0)
    oxygen_saturation: float | None = Field(None, ge=0, le=100)
    weight: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)

class ClinicalData(CamelModel):
    history: str | None = None
    height: str | None = None
    weight: str | None = None
    bmi: str | None = None
    ideal_body_weight: str | None = None
    pulse: str | None = None
    systolic_bp: str | None = None
    diastolic_bp: str | None = None
    respiratory_rate: str | None = None
    general_examination: str | None = None
    systemic_examination: str | None = None
    course_in_hospital: str | None = None
    discharge_instructions: str | None = None
    medications: list[Medication] = []
    opinion_text: str | None = None
    recommendations: str | None = None
    treatment_advised: str | None = None
    usg_report: str | None = None
    kidney_biopsy_report: str | None = None
    diagnosis_profile: dict | None = None

class VisitCreate(CamelModel):
    patient_id: uuid.UUID
    date: DateStr
    visit_type: VisitType
    visit_remark: str | None = None
    group_name: PatientGroup | None = None
    chief_complaint: str | None = Field(None, max_length=500)
    diagnoses: list[Diagnosis] = []
    clinical_data: ClinicalData = Field(default_factory=ClinicalData)
    vital_signs: VitalSigns = Field(default_factory=VitalSigns)
    follow_up_date: DateStr | None = None
    follow_up_instructions: str | None = None

class VisitUpdate(CamelModel):
    date: DateStr | None = None
    visit_type: VisitType | None = None
    visit_remark: str | None = None
    group_name: PatientGroup | None = None
    chief_complaint: str | None = Field(None, max_length=500)
    diagnoses: list[Diagnosis] | None = None
    clinical_data: ClinicalData | None = None
    vital_signs: VitalSigns | None = None
    follow_up_date: DateStr | None = None
    follow_up_instructions: str | None = None

class VisitOut(CamelModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    date: str
    visit_type: str
    visit_remark: str | None = None
    group_name: str | None = None
    chief_complaint: str | None = None
    diagnoses: list[Diagnosis]
    clinical_data: ClinicalData
    vital_signs: VitalSigns
    systolic_bp: int | None = None
    diastolic_bp: int | None = None
    follow_up_date: str | None = None
    follow_up_instructions: str | None = None
    created_at: datetime
    updated_at: datetime
