from pydantic import Field
from nephrolite.core.casing import CamelModel
from nephrolite.modules.clinical.calculators import Sex, AlbuminuriaUnit

class DisabilityInput(CamelModel):
    age: float = Field(..., ge=0, le=150)
    sex: Sex
    serum_creatinine: float = Field(..., gt=0)
    albuminuria: float = Field(..., ge=0)
    albuminuria_unit: AlbuminuriaUnit = "mg/g"
    on_renal_replacement_therapy: bool = False

class DisabilityResult(CamelModel):
    egfr: float
    ckd_stage: str
    albuminuria_category: str
    disability_percentage: int
    ckd_stage_description: str
    albuminuria_category_description: str
    on_rrt: bool
    recommendations: str

class KfreInput(CamelModel):
    age: float | None = Field(None, ge=0, le=150)
    sex: Sex
    egfr: float | None = Field(None, ge=0)
    uacr: float | None = Field(None, ge=0)
    calcium: float | None = None
    phosphate: float | None = None
    albumin: float | None = None
    bicarbonate: float | None = None

class KfreResult(CamelModel):
    two_year: float | None = None
    five_year: float | None = None
