"""Pure transforms from the legacy ``patientForm`` export to NephroLite rows.

Nothing here touches the database: every function takes plain JSON values and
returns snake_case dicts ready for the repositories.
"""
import re
from datetime import date, datetime
from typing import Any

from nephrolite.core.values import NEPHRO_ID_PATTERN, html_to_plain_text

__all__ = [
    "INVESTIGATION_FIELD_MAP", "TEST_KEY_MAP", "parse_patient_name", "map_gender", "age_to_dob",
    "parse_import_date", "html_to_plain_text", "extract_dropdown_value", "map_investigation_tests",
    "map_visit", "validate_import_record", "transform_patient_record",
]

# legacy field -> display name, group, unit, normal range
INVESTIGATION_FIELD_MAP: dict[str, dict[str, str]] = {
    "hb": {"name": "Hemoglobin (Hb)", "group": "Hematological", "unit": "g/dL", "normal_range": "13.5-17.5"},
    "tlc": {"name": "Total Leucocyte Count (TLC)", "group": "Hematological", "unit": "/mm³", "normal_range": "4000-11000"},
    "dlc": {"name": "Differential Leucocyte Count (DLC)", "group": "Hematological", "unit": "%", "normal_range": "N:40-75,L:20-45"},
    "plt": {"name": "Platelet Count", "group": "Hematological", "unit": "lakh/mm³", "normal_range": "1.5-4.5"},
    "esr": {"name": "Erythrocyte Sedimentation Rate (ESR)", "group": "Hematological", "unit": "mm/hr", "normal_range": "0-20"},
    "pt": {"name": "Prothrombin Time (PT)", "group": "Hematological", "unit": "sec", "normal_range": "11-13.5"},
    "inr": {"name": "INR", "group": "Hematological", "normal_range": "0.8-1.2"},
    "urea": {"name": "Blood Urea", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "15-45"},
    "creatinine": {"name": "Serum Creatinine", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "0.6-1.2"},
    "sodium": {"name": "Serum Sodium (Na+)", "group": "Biochemistry", "unit": "mEq/L", "normal_range": "135-145"},
    "potassium": {"name": "Serum Potassium (K+)", "group": "Biochemistry", "unit": "mEq/L", "normal_range": "3.5-5.1"},
    "calcium": {"name": "Serum Calcium", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "8.5-10.5"},
    "phosphate": {"name": "Serum Phosphate", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "2.5-4.5"},
    "uricAcid": {"name": "Serum Uric Acid", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "3.5-7.2"},
    "alp": {"name": "Alkaline Phosphatase (ALP)", "group": "Biochemistry", "unit": "IU/L", "normal_range": "44-147"},
    "tp": {"name": "Total Protein", "group": "Biochemistry", "unit": "g/dL", "normal_range": "6.0-8.3"},
    "albumin": {"name": "Serum Albumin", "group": "Biochemistry", "unit": "g/dL", "normal_range": "3.5-5.5"},
    "bloodSugarFPi": {"name": "Fasting Blood Sugar (FBS)", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "70-100"},
    "bloodSugarR": {"name": "Random Blood Sugar", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "70-140"},
    "pBs": {"name": "Post Prandial Blood Sugar (PPBS)", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "<140"},
    "tChol": {"name": "Total Cholesterol", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "<200"},
    "hdl": {"name": "HDL Cholesterol", "group": "Biochemistry", "unit": "mg/dL", "normal_range": ">40"},
    "ldl": {"name": "LDL Cholesterol", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "<100"},
    "tg": {"name": "Triglycerides (TG)", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "<150"},
    "totalBilirubin": {"name": "Total Bilirubin", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "0.3-1.2"},
    "directBilirubin": {"name": "Direct Bilirubin", "group": "Biochemistry", "unit": "mg/dL", "normal_range": "0.0-0.3"},
    "ast": {"name": "AST (SGOT)", "group": "Biochemistry", "unit": "IU/L", "normal_range": "5-40"},
    "alt": {"name": "ALT (SGPT)", "group": "Biochemistry", "unit": "IU/L", "normal_range": "7-56"},
    "iPTh": {"name": "iPTH (Intact PTH)", "group": "Special Investigations", "unit": "pg/mL", "normal_range": "15-65"},
    "vitaminD": {"name": "Vitamin D", "group": "Special Investigations", "unit": "ng/mL", "normal_range": "30-100"},
    "hbsAg": {"name": "HBsAg", "group": "Serology"},
    "antiHcv": {"name": "Anti-HCV", "group": "Serology"},
    "hiv": {"name": "HIV I & II", "group": "Serology"},
    "ana": {"name": "ANA (Antinuclear Antibody)", "group": "Serology"},
    "dsDNA": {"name": "dsDNA", "group": "Serology", "unit": "IU/mL"},
    "serumCThree": {"name": "C3", "group": "Serology", "unit": "mg/dL", "normal_range": "90-180"},
    "serumCFour": {"name": "C4", "group": "Serology", "unit": "mg/dL", "normal_range": "10-40"},
    "cAnca": {"name": "c-ANCA", "group": "Serology"},
    "pAnca": {"name": "p-ANCA", "group": "Serology"},
    "widal": {"name": "WIDAL", "group": "Serology"},
    "urineREME": {"name": "Urine Routine & Microscopy (R/M)", "group": "Urine Analysis"},
    "urineCS": {"name": "Urine Culture & Sensitivity", "group": "Urine Analysis"},
    "twentyFourHrUrineProtein": {"name": "24-hour Urine Protein", "group": "Urine Analysis", "unit": "mg/day", "normal_range": "<150"},
    "usgAbdo": {"name": "USG KUB", "group": "Radiology"},
    "kidneyBiopsy": {"name": "Kidney Biopsy", "group": "Special Investigations"},
    "twoDEchoReport": {"name": "2D Echocardiography", "group": "Special Investigations"},
    "dtpaGFR": {"name": "DTPA GFR", "group": "Special Investigations", "unit": "mL/min/1.73m²"},
    "ncctAbdomenKub": {"name": "CT KUB (NCCT)", "group": "Radiology"},
    "mriBrain": {"name": "MRI Brain", "group": "Radiology"},
}

# legacy field -> investigation master code
TEST_KEY_MAP: dict[str, str] = {
    "hb": "hem_001", "tlc": "hem_002", "plt": "hem_004", "esr": "hem_005", "pt": "hem_006", "inr": "hem_010",
    "urea": "bio_001", "creatinine": "bio_002", "sodium": "bio_003", "potassium": "bio_004",
    "calcium": "bio_006", "phosphate": "bio_007", "uricAcid": "bio_008", "alp": "bio_009",
    "tp": "bio_010", "albumin": "bio_011", "bloodSugarFPi": "bio_012", "bloodSugarR": "bio_013",
    "tChol": "bio_019", "hdl": "bio_020", "ldl": "bio_021", "totalBilirubin": "bio_022",
    "directBilirubin": "bio_023", "ast": "bio_024", "alt": "bio_025", "tg": "bio_026",
    "ana": "ser_004", "dsDNA": "ser_005", "serumCThree": "ser_006", "serumCFour": "ser_007",
    "hbsAg": "ser_001", "antiHcv": "ser_002", "hiv": "ser_003",
    "vitaminD": "spc_004", "kidneyBiopsy": "spc_001",
    "twentyFourHrUrineProtein": "urn_003",
}

# report-style fields that become record notes rather than tests
NOTE_FIELDS = ("chestXRay", "ecg", "others", "testComment")
SKIP_VALUES = {"", "NAD", "___"}

_DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d", "%d %b %Y", "%d %B %Y")
_NEPHRO_ID = re.compile(NEPHRO_ID_PATTERN)


def parse_patient_name(full_name: str | None) -> tuple[str, str]:
    """Last word is the last name; a blank name becomes ("Unknown", ".")."""
    parts = (full_name or "").split()
    if not parts:
        return "Unknown", "."
    if len(parts) == 1:
        return parts[0], "."
    return " ".join(parts[:-1]), parts[-1]


def extract_dropdown_value(dropdown: Any) -> str:
    if not dropdown:
        return ""
    if isinstance(dropdown, dict):
        return str(dropdown.get("value") or dropdown.get("code") or "")
    return str(dropdown)


def map_gender(value: Any) -> str:
    code = dropdown_code(value).strip().lower()
    return "Female" if code in ("f", "female") else "Male"


def dropdown_code(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("code") or value.get("value") or "")
    return str(value or "")


def age_to_dob(age: Any, reference: date | None = None) -> str:
    try:
        years = int(str(age).strip())
    except (TypeError, ValueError):
        return "1970-01-01"
    if years < 0 or years > 150:
        return "1970-01-01"
    reference = reference or date.today()
    return f"{reference.year - years}-06-15"


def parse_import_date(value: Any) -> str:
    """Best-effort date parse to ``YYYY-MM-DD``; unparseable input gives ``''``."""
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return ""


def _title_from_key(key: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", key)
    return spaced[:1].upper() + spaced[1:]


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def map_investigation_tests(test_detail: dict | None, date_of_test: Any = None) -> dict:
    """One legacy test entry to ``{date, tests, notes}``."""
    test_detail = test_detail or {}
    tests = []
    for key, raw in test_detail.items():
        if key in NOTE_FIELDS:
            continue
        result = extract_dropdown_value(raw).strip()
        if result in SKIP_VALUES:
            continue
        info = INVESTIGATION_FIELD_MAP.get(key)
        tests.append({
            "id": TEST_KEY_MAP.get(key, f"custom_{key}"),
            "name": info["name"] if info else _title_from_key(key),
            "group": info["group"] if info else "Imported",
            "result": result,
            "unit": info.get("unit") if info else None,
            "normal_range": info.get("normal_range") if info else None,
            "result_type": "numeric" if _is_number(result) else "text",
        })

    notes = []
    cxr = extract_dropdown_value(test_detail.get("chestXRay"))
    if cxr and cxr != "NAD":
        notes.append(f"CXR: {cxr}")
    ecg = extract_dropdown_value(test_detail.get("ecg"))
    if ecg and ecg != "NAD":
        notes.append(f"ECG: {ecg}")
    others = extract_dropdown_value(test_detail.get("others"))
    if others and others.strip() not in ("Others :", "Others:"):
        notes.append(others)

    return {
        "date": parse_import_date(date_of_test),
        "tests": tests,
        "notes": "\n".join(notes) if notes else None,
    }


def _primary_disease(visit: dict) -> dict:
    diseases = (visit.get("patientDiseaseDetails") or {}).get("patientPrimaryDiseaseList") or []
    return diseases[0] if diseases else {}


def _diagnosis_name(visit: dict) -> str:
    disease = _primary_disease(visit)
    return (
        disease.get("primaryDiseaseReportDisplayName")
        or (visit.get("patientDischarge") or {}).get("diagnosis")
        or ""
    )


def _number(value: Any) -> float | None:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def map_visit(visit: dict, today: date | None = None) -> dict:
    tests = visit.get("patientTestInfo") or []
    day = (
        parse_import_date(tests[0].get("dateOfTest") if tests else None)
        or parse_import_date(_primary_disease(visit).get("dateOfDetection"))
        or (today or date.today()).isoformat()
    )

    exam = visit.get("patientHistoryExamination") or {}
    discharge = visit.get("patientDischarge") or {}
    opinion = visit.get("patientOpinion") or {}
    bp, pulse, weight = exam.get("bloodPressure"), exam.get("pulse"), exam.get("weight")

    general = " ".join(p for p in (
        exam.get("examinationsExamination") or "",
        f"BP: {bp}" if bp else "",
        f"Pulse: {pulse}" if pulse else "",
        f"Wt: {weight}" if weight else "",
    ) if p).strip()
    opinion_text = opinion.get("patientOpinion") or ""
    treatment = opinion.get("patientTreatmentAdvised") or ""
    recommendations = " <br/> ".join(p for p in (opinion_text, opinion.get("patientRecommendations") or "", treatment) if p)
    diagnosis = _diagnosis_name(visit)

    return {
        "date": day,
        "visit_type": "Consultation",
        "visit_remark": "Imported from JSON",
        "clinical_data": {
            "history": exam.get("examinationsSummaryHistory") or discharge.get("historySummary") or "",
            "general_examination": general,
            "systemic_examination": "",
            "opinion_text": opinion_text,
            "recommendations": recommendations,
            "treatment_advised": treatment,
            "diagnosis_profile": {"diagnosis": diagnosis},
        },
        "vital_signs": {
            "blood_pressure": str(bp).strip() if bp else None,
            "pulse": _number(pulse),
            "weight": _number(weight),
        },
        "diagnoses": [{
            "id": "imported-dx",
            "name": diagnosis or "Diagnosis Not Recorded",
            "icd_code": "",
            "icd_name": "",
        }],
    }


def validate_import_record(source: dict | None) -> tuple[bool, list[str]]:
    """Errors block the import; entries prefixed ``Warning:`` do not."""
    errors: list[str] = []
    info = (source or {}).get("patientInfo")
    if not info:
        return False, ["Missing patient information"]
    if not str(info.get("patientName") or "").strip():
        errors.append("Patient name is required")
    if not info.get("gender"):
        errors.append("Patient gender is required")
    if not info.get("patientAge") and not info.get("dob"):
        errors.append("Warning: Missing patient age and date of birth")
    return not [e for e in errors if not e.startswith("Warning")], errors


def transform_patient_record(key: str, source: dict, today: date | None = None) -> dict:
    """Build ``{"patient", "visits", "investigations"}`` for one legacy record.

    Visits and investigations carry no ``patient_id``; the loader sets it once
    the patient row exists.
    """
    today = today or date.today()
    info = source.get("patientInfo") or {}
    first_name, last_name = parse_patient_name(info.get("patientName"))

    if info.get("patientAge") not in (None, ""):
        dob = age_to_dob(info.get("patientAge"), today)
    else:
        dob = parse_import_date(info.get("dob")) or "1970-01-01"

    raw_visits = source.get("patientVisitDetails") or []
    visits, investigations = [], []
    for raw in raw_visits:
        visit = map_visit(raw, today)
        visits.append(visit)
        for entry in raw.get("patientTestInfo") or []:
            mapped = map_investigation_tests(entry.get("testDetail"), entry.get("dateOfTest"))
            if not mapped["tests"]:
                continue
            notes = [n for n in (entry.get("testComment"), mapped["notes"]) if n]
            investigations.append({
                "date": mapped["date"] or visit["date"],
                "tests": mapped["tests"],
                "notes": "\n".join(notes) if notes else "Imported Investigation",
            })

    latest = raw_visits[0] if raw_visits else {}
    disease = _primary_disease(latest)
    nephro_id = str(info.get("referenceNumber") or key).strip().upper()
    # same rule the patients API applies
    if len(nephro_id) > 64 or not _NEPHRO_ID.match(nephro_id):
        raise ValueError(f"Nephro ID {nephro_id!r} is not valid")

    patient = {
        "nephro_id": nephro_id,
        "first_name": first_name,
        "last_name": last_name,
        "dob": dob,
        "gender": map_gender(info.get("gender")),
        "address": {},
        "guardian": {},
        "clinical_profile": {
            "primary_diagnosis": disease.get("primaryDiseaseReportDisplayName")
            or extract_dropdown_value(disease.get("primaryDisease")) or None,
            "disability": (latest.get("patientDiseaseDetails") or {}).get("secondaryDisabilityPlainText"),
            "tags": [],
            "vaccinations": [],
            "blood_group": "Unknown",
        },
        "registration_date": today.isoformat(),
        "patient_status": "OPD",
        "is_tracked": True,
    }
    return {"patient": patient, "visits": visits, "investigations": investigations, "source_key": key}
