import uuid

import pytest
from sqlalchemy import select, func

from nephrolite.modules.audit.service import AuditService
from nephrolite.modules.dialysis.models import DialysisSession
from nephrolite.modules.dialysis.schemas import DialysisSessionCreate
from nephrolite.modules.dialysis.service import DialysisSessionService
from nephrolite.modules.patients.models import Patient
from conftest import ORG_ID, LOCAL_USER_ID

API = "/api/v1/dialysis-sessions"


def session_payload(patient_id: str, **overrides) -> dict:
    data = {
        "patientId": patient_id,
        "dateOfSession": "2024-02-01",
        "typeOfDialysis": "Hemodialysis",
        "duration": {"hours": 4, "minutes": 0},
        "weightBefore": 64.5,
        "weightAfter": 62.0,
        "ultrafiltration": 2500,
        "bpBefore": "160/95",
        "accessType": "AV Fistula",
        "notes": "Uneventful",
    }
    data.update(overrides)
    return data


async def test_create_flattens_and_stamps_patient(client, patient):
    resp = await client.post(API, json=session_payload(patient["id"]))
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["weightBefore"] == 64.5
    assert body["accessType"] == "AV Fistula"
    assert body["notes"] == "Uneventful"
    assert (body["systolicBp"], body["diastolicBp"]) == (160, 95)
    assert body["weightKg"] == 64.5
    assert body["ufVolumeMl"] == 2500
    assert body["duration"] == {"hours": 4, "minutes": 0}

    refreshed = (await client.get(f"/api/v1/patients/{patient['id']}")).json()
    assert refreshed["lastDialysisDate"] == "2024-02-01"


async def test_older_session_keeps_latest_date(client, patient):
    await client.post(API, json=session_payload(patient["id"], dateOfSession="2024-02-10"))
    await client.post(API, json=session_payload(patient["id"], dateOfSession="2024-01-15"))
    refreshed = (await client.get(f"/api/v1/patients/{patient['id']}")).json()
    assert refreshed["lastDialysisDate"] == "2024-02-10"


async def test_duration_limit(client, patient):
    resp = await client.post(API, json=session_payload(patient["id"], duration={"hours": 10, "minutes": 1}))
    assert resp.status_code == 422


async def test_update_merges_readings(client, patient):
    created = (await client.post(API, json=session_payload(patient["id"]))).json()
    resp = await client.patch(f"{API}/{created['id']}", json={"bpBefore": "150/90", "status": "Completed"})
    body = resp.json()
    assert body["status"] == "Completed"
    assert body["bpBefore"] == "150/90"
    assert body["systolicBp"] == 150
    assert body["weightBefore"] == 64.5
    assert body["notes"] == "Uneventful"


async def test_update_null_clears_reading(client, patient):
    created = (await client.post(API, json=session_payload(patient["id"]))).json()
    resp = await client.patch(f"{API}/{created['id']}", json={"bpBefore": None, "notes": None, "status": None})
    body = resp.json()
    assert body["bpBefore"] is None
    assert (body["systolicBp"], body["diastolicBp"]) == (None, None)
    assert body["notes"] is None
    # required columns ignore null
    assert body["status"] == created["status"]
    assert body["weightBefore"] == 64.5


async def test_delete_removes_row(client, patient, test_db):
    created = (await client.post(API, json=session_payload(patient["id"]))).json()
    assert (await client.delete(f"{API}/{created['id']}")).status_code == 204
    assert (await client.get(f"{API}/{created['id']}")).status_code == 404
    assert await test_db.scalar(select(func.count()).select_from(DialysisSession)) == 0


async def test_create_rolls_back_when_audit_fails(test_db, monkeypatch):
    patient = Patient(org_id=ORG_ID, nephro_id="NL-900", first_name="Ravi", last_name="Rao", dob="1970-01-01",
                      gender="Male", registration_date="2024-01-01", last_dialysis_date="2024-01-01")
    test_db.add(patient)
    await test_db.commit()
    patient_id = patient.id

    async def broken_record(self, *args, **kwargs):
        raise RuntimeError("audit store unavailable")

    monkeypatch.setattr(AuditService, "record", broken_record)
    payload = DialysisSessionCreate(patient_id=patient_id, date_of_session="2024-03-01", type_of_dialysis="Hemodialysis")
    with pytest.raises(RuntimeError):
        await DialysisSessionService(test_db).create(ORG_ID, payload, actor_id=LOCAL_USER_ID)

    assert await test_db.scalar(select(func.count()).select_from(DialysisSession)) == 0
    last = await test_db.scalar(select(Patient.last_dialysis_date).where(Patient.id == patient_id))
    assert last == "2024-01-01"


async def test_missing_patient(client):
    resp = await client.post(API, json=session_payload(str(uuid.uuid4())))
    assert resp.status_code == 404
