"""Kidney function calculators: CKD-EPI 2021 eGFR, KDIGO staging, disability grading and KFRE."""
import math
from typing import Literal

Sex = Literal["Male", "Female"]
CkdStage = Literal["G1", "G2", "G3a", "G3b", "G4", "G5"]
AlbuminuriaCategory = Literal["A1", "A2", "A3"]
AlbuminuriaUnit = Literal["mg/g", "mg/mmol"]

CKD_STAGE_DESCRIPTIONS = {
    "G1": "Normal or high (≥90 ml/min/1.73m²)",
    "G2": "Mildly decreased (60-89 ml/min/1.73m²)",
    "G3a": "Mildly to moderately decreased (45-59 ml/min/1.73m²)",
    "G3b": "Moderately to severely decreased (30-44 ml/min/1.73m²)",
    "G4": "Severely decreased (15-29 ml/min/1.73m²)",
    "G5": "Kidney failure (<15 ml/min/1.73m²)",
}

ALBUMINURIA_DESCRIPTIONS = {
    "A1": "Normal to mildly increased (<30 mg/g or <3 mg/mmol)",
    "A2": "Moderately increased (30-299 mg/g or 3-29 mg/mmol)",
    "A3": "Severely increased (≥300 mg/g or ≥30 mg/mmol)",
}

# disability percentage by CKD stage and albuminuria category
DISABILITY_MATRIX = {
    "G1": {"A1": 15, "A2": 40, "A3": 60},
    "G2": {"A1": 15, "A2": 40, "A3": 60},
    "G3a": {"A1": 40, "A2": 40, "A3": 60},
    "G3b": {"A1": 60, "A2": 60, "A3": 80},
    "G4": {"A1": 80, "A2": 80, "A3": 100},
    "G5": {"A1": 100, "A2": 100, "A3": 100},
}

MG_MMOL_TO_MG_G = 8.8


def calculate_egfr(age: float, sex: Sex, creatinine: float) -> float:
    """CKD-EPI 2021 (race-free), creatinine in mg/dL."""
    kappa = 0.7 if sex == "Female" else 0.9
    alpha = -0.241 if sex == "Female" else -0.302
    ratio = creatinine / kappa
    egfr = 142 * min(ratio, 1) ** alpha * max(ratio, 1) ** -1.200 * 0.9938 ** age
    return round(egfr, 2)


def ckd_stage(egfr: float) -> CkdStage:
    if egfr >= 90:
        return "G1"
    if egfr >= 60:
        return "G2"
    if egfr >= 45:
        return "G3a"
    if egfr >= 30:
        return "G3b"
    if egfr >= 15:
        return "G4"
    return "G5"


def albuminuria_category(value: float, unit: AlbuminuriaUnit = "mg/g") -> AlbuminuriaCategory:
    mg_g = value * MG_MMOL_TO_MG_G if unit == "mg/mmol" else value
    if mg_g < 30:
        return "A1"
    if mg_g < 300:
        return "A2"
    return "A3"


def disability_percentage(stage: CkdStage, category: AlbuminuriaCategory, on_rrt: bool = False) -> int:
    if on_rrt:
        return 100
    return DISABILITY_MATRIX[stage][category]


def recommendations(stage: CkdStage, category: AlbuminuriaCategory, percentage: int, on_rrt: bool) -> str:
    if on_rrt:
        return ("Patient is on Renal Replacement Therapy (Dialysis/Transplant). Disability: 100% with "
                "Constant Attendance Allowance (CAA). Regular nephrology follow-up required.")

    out = []
    if stage in ("G4", "G5"):
        out.append("Consider referral for renal replacement therapy planning.")
        out.append("Intensive nephrology follow-up required (monthly or more frequent).")
    elif stage in ("G3a", "G3b"):
        out.append("Regular nephrology follow-up recommended (every 3-6 months).")
        out.append("Monitor for CKD progression and complications.")
    else:
        out.append("Annual nephrology review recommended.")

    if category == "A3":
        out.append("Significant proteinuria present. Consider ACE inhibitor/ARB therapy if not contraindicated.")
        out.append("Strict blood pressure control essential (target <130/80 mmHg).")
    elif category == "A2":
        out.append("Moderate albuminuria present. Blood pressure optimization recommended.")

    if percentage >= 60:
        out.append(f"High disability percentage ({percentage}%). Consider medical board review for employment restrictions.")
    elif percentage >= 40:
        out.append(f"Moderate disability ({percentage}%). Regular monitoring and functional assessment recommended.")

    out.append("Maintain CKD-appropriate diet (low sodium, appropriate protein restriction).")
    out.append("Avoid nephrotoxic medications (NSAIDs, contrast agents) when possible.")
    return " ".join(out)


def assess_disability(
    age: float,
    sex: Sex,
    serum_creatinine: float,
    albuminuria: float,
    albuminuria_unit: AlbuminuriaUnit = "mg/g",
    on_rrt: bool = False,
) -> dict:
    egfr = calculate_egfr(age, sex, serum_creatinine)
    stage = ckd_stage(egfr)
    category = albuminuria_category(albuminuria, albuminuria_unit)
    percentage = disability_percentage(stage, category, on_rrt)
    return {
        "egfr": egfr,
        "ckd_stage": stage,
        "albuminuria_category": category,
        "disability_percentage": percentage,
        "ckd_stage_description": CKD_STAGE_DESCRIPTIONS[stage],
        "albuminuria_category_description": ALBUMINURIA_DESCRIPTIONS[category],
        "on_rrt": on_rrt,
        "recommendations": recommendations(stage, category, percentage, on_rrt),
    }


# Tangri et al. 2016, 8-variable model, North American cohort
KFRE_COEFFICIENTS = {
    "age": -0.2301,  # per 10 years
    "sex_female": -0.1899,
    "egfr": -0.5364,  # per 5 mL/min/1.73m²
    "uacr_log": 0.4633,
    "calcium": -0.1031,
    "phosphate": 0.2882,
    "albumin": -0.3204,
    "bicarbonate": -0.1251,
}
KFRE_CENTERING = 3.3644
BASELINE_SURVIVAL_2Y = 0.9835
BASELINE_SURVIVAL_5Y = 0.9525


def calculate_kfre(
    age: float | None,
    sex: Sex,
    egfr: float | None,
    uacr: float | None,
    calcium: float | None = None,
    phosphate: float | None = None,
    albumin: float | None = None,
    bicarbonate: float | None = None,
) -> dict[str, float | None]:
    """2- and 5-year kidney failure risk in percent; both None when the model does not apply."""
    if not age or not egfr or not uacr or egfr >= 60:
        return {"two_year": None, "five_year": None}

    c = KFRE_COEFFICIENTS
    lp = c["age"] * (age / 10)
    lp += c["sex_female"] if sex == "Female" else 0
    lp += c["egfr"] * (egfr / 5)
    lp += c["uacr_log"] * math.log(uacr)
    # optional labs only contribute when present
    for name, value in (("calcium", calcium), ("phosphate", phosphate), ("albumin", albumin), ("bicarbonate", bicarbonate)):
        if value:
            lp += c[name] * value

    hazard = math.exp(lp - KFRE_CENTERING)
    return {
        "two_year": 100 * (1 - BASELINE_SURVIVAL_2Y ** hazard),
        "five_year": 100 * (1 - BASELINE_SURVIVAL_5Y ** hazard),
    }
