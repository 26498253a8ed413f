from datetime import date

import pytest
from sqlalchemy import select, func

from nephrolite.modules.importer.loader import import_patient_form
from nephrolite.modules.importer.transform import (
    parse_patient_name, map_gender, age_to_dob, parse_import_date, map_investigation_tests,
    map_visit, validate_import_record, transform_patient_record,
)
from nephrolite.modules.patients.models import Patient
from nephrolite.modules.visits.models import Visit
from nephrolite.modules.investigations.models import InvestigationRecord
from conftest import ORG_ID

TODAY = date(2024, 1, 10)


def legacy_record(name="Ravi Kumar Singh", reference="nl-100", **info_overrides) -> dict:
    info = {"patientName": name, "gender": {"code": "M", "value": "Male"}, "patientAge": "45", "referenceNumber": reference}
    info.update(info_overrides)
    return {
        "patientInfo": info,
        "patientVisitDetails": [{
            "patientTestInfo": [{
                "dateOfTest": "05/01/2024",
                "testComment": "Fasting sample",
                "testDetail": {
                    "hb": "10.2",
                    "creatinine": "3.4",
                    "urineREME": "Protein ++",
                    "esr": "NAD",
                    "tlc": "___",
                    "serumFerritin": "220",
                    "chestXRay": "Cardiomegaly",
                    "ecg": "NAD",
                },
            }],
            "patientHistoryExamination": {
                "examinationsSummaryHistory": "Pedal edema for 2 weeks",
                "examinationsExamination": "Pallor present.",
                "bloodPressure": "150/90",
                "pulse": "88",
                "weight": "61.5",
            },
            "patientDiseaseDetails": {
                "patientPrimaryDiseaseList": [{"primaryDiseaseReportDisplayName": "Diabetic nephropathy"}],
                "secondaryDisabilityPlainText": "CKD 4",
            },
            "patientOpinion": {"patientOpinion": "Progressive CKD", "patientTreatmentAdvised": "Start EPO"},
        }],
    }


@pytest.mark.parametrize("raw,expected", [
    ("Ravi Kumar Singh", ("Ravi Kumar", "Singh")),
    ("  Meena   Das ", ("Meena", "Das")),
    ("Prakash", ("Prakash", ".")),
    ("", ("Unknown", ".")),
    (None, ("Unknown", ".")),
])
def test_parse_patient_name(raw, expected):
    assert parse_patient_name(raw) == expected


def test_gender_and_age():
    assert map_gender({"code": "F"}) == "Female"
    assert map_gender("female") == "Female"
    assert map_gender({"code": "M"}) == "Male"
    assert map_gender(None) == "Male"
    assert age_to_dob("42", TODAY) == "1982-06-15"
    assert age_to_dob("unknown", TODAY) == "1970-01-01"
    assert age_to_dob(200, TODAY) == "1970-01-01"


@pytest.mark.parametrize("raw,expected", [
    ("2024-03-05", "2024-03-05"),
    ("2024-03-05T10:00:00Z", "2024-03-05"),
    ("05/03/2024", "2024-03-05"),
    ("05-03-2024", "2024-03-05"),
    ("5 Mar 2024", "2024-03-05"),
    (date(2024, 3, 5), "2024-03-05"),
    ("not a date", ""),
    (None, ""),
])
def test_parse_import_date(raw, expected):
    assert parse_import_date(raw) == expected


def test_investigation_tests_skip_placeholders_and_collect_notes():
    detail = legacy_record()["patientVisitDetails"][0]["patientTestInfo"][0]["testDetail"]
    mapped = map_investigation_tests(detail, "05/01/2024")
    assert mapped["date"] == "2024-01-05"

    by_name = {t["name"]: t for t in mapped["tests"]}
    assert set(by_name) == {"Hemoglobin (Hb)", "Serum Creatinine", "Urine Routine & Microscopy (R/M)", "Serum Ferritin"}
    hb = by_name["Hemoglobin (Hb)"]
    assert hb["id"] == "hem_001"
    assert hb["unit"] == "g/dL"
    assert hb["result_type"] == "numeric"
    assert by_name["Urine Routine & Microscopy (R/M)"]["result_type"] == "text"
    ferritin = by_name["Serum Ferritin"]
    assert ferritin["id"] == "custom_serumFerritin"
    assert ferritin["group"] == "Imported"
    assert mapped["notes"] == "CXR: Cardiomegaly"


def test_map_visit():
    raw = legacy_record()["patientVisitDetails"][0]
    visit = map_visit(raw, TODAY)
    assert visit["date"] == "2024-01-05"
    assert visit["visit_type"] == "Consultation"
    assert visit["vital_signs"] == {"blood_pressure": "150/90", "pulse": 88.0, "weight": 61.5}
    clinical = visit["clinical_data"]
    assert clinical["history"] == "Pedal edema for 2 weeks"
    assert clinical["general_examination"] == "Pallor present. BP: 150/90 Pulse: 88 Wt: 61.5"
    assert clinical["recommendations"] == "Progressive CKD <br/> Start EPO"
    assert visit["diagnoses"][0]["name"] == "Diabetic nephropathy"

    # nothing dated falls back to today
    assert map_visit({}, TODAY)["date"] == "2024-01-10"
    assert map_visit({}, TODAY)["diagnoses"][0]["name"] == "Diagnosis Not Recorded"


def test_validate_import_record():
    assert validate_import_record(None) == (False, ["Missing patient information"])
    ok, errors = validate_import_record({"patientInfo": {"patientName": " ", "gender": ""}})
    assert not ok
    assert "Patient name is required" in errors
    assert "Patient gender is required" in errors
    ok, errors = validate_import_record({"patientInfo": {"patientName": "Ravi", "gender": "M"}})
    assert ok
    assert errors == ["Warning: Missing patient age and date of birth"]


def test_transform_patient_record():
    out = transform_patient_record("key-1", legacy_record(), TODAY)
    patient = out["patient"]
    assert patient["nephro_id"] == "NL-100"
    assert (patient["first_name"], patient["last_name"]) == ("Ravi Kumar", "Singh")
    assert patient["dob"] == "1979-06-15"
    assert patient["gender"] == "Male"
    assert patient["clinical_profile"]["primary_diagnosis"] == "Diabetic nephropathy"
    assert patient["clinical_profile"]["disability"] == "CKD 4"
    assert patient["registration_date"] == "2024-01-10"
    assert len(out["visits"]) == 1
    [record] = out["investigations"]
    assert record["date"] == "2024-01-05"
    assert record["notes"] == "Fasting sample\nCXR: Cardiomegaly"

    # no reference number: the key becomes the nephro id
    out = transform_patient_record("abc-9", legacy_record(reference=None, patientAge="", dob="1990-02-03"), TODAY)
    assert out["patient"]["nephro_id"] == "ABC-9"
    assert out["patient"]["dob"] == "1990-02-03"


async def test_import_patient_form(test_db):
    form = {
        "a": legacy_record(),
        "b": legacy_record(name="Sunita Rao", reference="nl-101", gender={"code": "F"}),
        "c": {"patientInfo": {"patientName": "", "gender": ""}},
        "d": legacy_record(name="Duplicate", reference="NL-100"),
    }
    summary = await import_patient_form(test_db, ORG_ID, form, commit_every=2)

    assert summary.processed == 2
    assert summary.skipped == 1
    assert summary.errors == 1
    assert summary.messages[0].startswith("c:")

    patients = (await test_db.execute(select(Patient).order_by(Patient.nephro_id))).scalars().all()
    assert [p.nephro_id for p in patients] == ["NL-100", "NL-101"]
    assert patients[1].gender == "Female"
    assert await test_db.scalar(select(func.count()).select_from(Visit)) == 2
    visit = (await test_db.execute(select(Visit).limit(1))).scalar_one()
    assert (visit.systolic_bp, visit.diastolic_bp) == (150, 90)
    assert await test_db.scalar(select(func.count()).select_from(InvestigationRecord)) == 2

    # a second run finds everything already present
    again = await import_patient_form(test_db, ORG_ID, form)
    assert (again.processed, again.skipped, again.errors) == (0, 3, 1)


@pytest.mark.parametrize("reference", ["NL 100", "nl_100", "X" * 65])
def test_transform_rejects_unusable_nephro_id(reference):
    with pytest.raises(ValueError):
        transform_patient_record("k", legacy_record(reference=reference), TODAY)


async def test_import_counts_bad_nephro_id_as_error(test_db):
    summary = await import_patient_form(test_db, ORG_ID, {
        "a": legacy_record(),
        "b": legacy_record(name="Meena Das", reference="NL#7"),
    })
    assert (summary.processed, summary.skipped, summary.errors) == (1, 0, 1)
    assert summary.messages[0].startswith("b:")
    assert await test_db.scalar(select(func.count()).select_from(Patient)) == 1
