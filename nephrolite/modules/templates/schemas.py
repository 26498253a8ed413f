import uuid
from pydantic import Field
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import TemplateType
from nephrolite.modules.visits.schemas import Diagnosis, Medication

class TemplateIn(CamelModel):
    template_name: str = Field(..., min_length=1, max_length=200)
    template_type: TemplateType
    diagnoses: list[Diagnosis] = []
    history: str | None = None
    general_examination: str | None = None
    systemic_examination: str | None = None
    medications: list[Medication] = []
    # discharge summary
    discharge_instructions: str | None = None
    usg_report: str | None = None
    kidney_biopsy_report: str | None = None
    # opinion report
    opinion_text: str | None = None
    recommendations: str | None = None

class IcdMapping(CamelModel):
    icd_code: str
    icd_name: str

class MasterDiagnosisIn(CamelModel):
    clinical_diagnosis: str = Field(..., min_length=1, max_length=300)
    icd_mappings: list[IcdMapping] = []

class MasterDiagnosisOut(CamelModel):
    id: uuid.UUID
    clinical_diagnosis: str
    icd_mappings: list[IcdMapping] = []
