from fastapi import APIRouter, Depends
from nephrolite.core.security import require_scopes
from nephrolite.modules.clinical.calculators import assess_disability, calculate_kfre
from nephrolite.modules.clinical.schemas import DisabilityInput, DisabilityResult, KfreInput, KfreResult

router = APIRouter(dependencies=[Depends(require_scopes("calculators:use"))])

@router.post("/calculators/disability", response_model=DisabilityResult)
async def disability(payload: DisabilityInput):
    return assess_disability(
        payload.age,
        payload.sex,
        payload.serum_creatinine,
        payload.albuminuria,
        payload.albuminuria_unit,
        payload.on_renal_replacement_therapy,
    )

@router.post("/calculators/kfre", response_model=KfreResult)
async def kfre(payload: KfreInput):
    return calculate_kfre(**payload.model_dump())
