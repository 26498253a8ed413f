import uuid
from datetime import datetime
from typing import Annotated
from pydantic import Field, StringConstraints
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import InvestigationGroup, ResultType
from nephrolite.core.values import DATE_PATTERN

DateStr = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]

class InvestigationTest(CamelModel):
    id: str | None = None  # master code, or a free id for ad-hoc tests
    group: str | None = None
    name: str = Field(..., min_length=1)
    result: str
    unit: str | None = None
    normal_range: str | None = None
    result_type: ResultType | None = None
    is_abnormal: bool | None = None

class InvestigationRecordCreate(CamelModel):
    patient_id: uuid.UUID
    date: DateStr
    tests: list[InvestigationTest] = Field(..., min_length=1)
    notes: str | None = None

class InvestigationRecordUpdate(CamelModel):
    date: DateStr | None = None
    tests: list[InvestigationTest] | None = None
    notes: str | None = None

class InvestigationRecordOut(CamelModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    date: str
    tests: list[InvestigationTest]
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

class InvestigationMasterIn(CamelModel):
    code: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1)
    group_name: InvestigationGroup
    unit: str | None = None
    normal_range: str | None = None
    result_type: ResultType = "numeric"
    options: list[str] = []

class InvestigationMasterOut(InvestigationMasterIn):
    id: uuid.UUID
    group_name: str

class InvestigationPanelIn(CamelModel):
    name: str = Field(..., min_length=1)
    group_name: InvestigationGroup
    test_codes: list[str] = Field(..., min_length=1)

class InvestigationPanelOut(InvestigationPanelIn):
    id: uuid.UUID
    group_name: str
