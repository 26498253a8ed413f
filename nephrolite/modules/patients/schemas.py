import uuid
from datetime import datetime
from typing import Annotated, Literal
from pydantic import EmailStr, Field, StringConstraints
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import BloodGroup, Gender, PatientStatus, ResidenceType
from nephrolite.core.values import DATE_PATTERN, NEPHRO_ID_PATTERN, PHONE_PATTERN

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]
NephroId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64, pattern=NEPHRO_ID_PATTERN)]

class Address(CamelModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    country: str | None = None

class Guardian(CamelModel):
    name: str | None = None
    relation: str | None = None
    contact: str | None = None

class Vaccination(CamelModel):
    name: str
    administered: bool = False
    date: DateStr | None = None
    next_dose_date: DateStr | None = None

class ClinicalProfile(CamelModel):
    primary_diagnosis: str | None = None
    tags: list[str] = []
    nutritional_status: str | None = None
    disability: str | None = None
    subspeciality_follow_up: str | None = None
    smoking_status: str | None = None
    alcohol_consumption: str | None = None
    vaccinations: list[Vaccination] = []
    pomr: str | None = None
    aabha_number: str | None = None
    blood_group: BloodGroup | None = None
    drug_allergies: str | None = None
    whatsapp_number: str | None = None

class PatientCreate(CamelModel):
    nephro_id: NephroId
    first_name: Name
    last_name: Name
    dob: DateStr
    gender: Gender
    contact: Phone | None = None
    email: EmailStr | Literal[""] | None = None
    address: Address = Field(default_factory=Address)
    guardian: Guardian = Field(default_factory=Guardian)
    clinical_profile: ClinicalProfile = Field(default_factory=ClinicalProfile)
    registration_date: DateStr | None = None
    service_name: str | None = None
    service_number: str | None = None
    rank: str | None = None
    unit_name: str | None = None
    formation: str | None = None
    patient_status: PatientStatus = "OPD"
    next_appointment_date: DateStr | None = None
    is_tracked: bool = False
    residence_type: ResidenceType | None = None

class PatientUpdate(CamelModel):
    nephro_id: NephroId | None = None
    first_name: Name | None = None
    last_name: Name | None = None
    dob: DateStr | None = None
    gender: Gender | None = None
    contact: Phone | None = None
    email: EmailStr | Literal[""] | None = None
    address: Address | None = None
    guardian: Guardian | None = None
    clinical_profile: ClinicalProfile | None = None
    registration_date: DateStr | None = None
    service_name: str | None = None
    service_number: str | None = None
    rank: str | None = None
    unit_name: str | None = None
    formation: str | None = None
    patient_status: PatientStatus | None = None
    next_appointment_date: DateStr | None = None
    is_tracked: bool | None = None
    residence_type: ResidenceType | None = None

class PatientOut(CamelModel):
    id: uuid.UUID
    nephro_id: str
    first_name: str
    last_name: str
    dob: str
    gender: str
    contact: str | None = None
    email: str | None = None
    address: Address
    guardian: Guardian
    clinical_profile: ClinicalProfile
    registration_date: str
    service_name: str | None = None
    service_number: str | None = None
    rank: str | None = None
    unit_name: str | None = None
    formation: str | None = None
    patient_status: str
    next_appointment_date: str | None = None
    is_tracked: bool
    residence_type: str | None = None
    last_dialysis_date: str | None = None
    created_at: datetime
    updated_at: datetime

class PatientPage(CamelModel):
    items: list[PatientOut]
    next_cursor: str | None = None
