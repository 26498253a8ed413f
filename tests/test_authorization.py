import uuid

from conftest import ORG_ID, patient_payload
from nephrolite.main import app
from nephrolite.core.security import get_principal, Principal

API = "/api/v1/patients"


async def test_nurse_cannot_edit_patients(client, patient, as_role):
    await as_role("nurse")
    resp = await client.patch(f"{API}/{patient['id']}", json={"firstName": "Changed"})
    assert resp.status_code == 403
    body = resp.json()
    assert body["code"] == "permission-denied"
    assert body["details"] == {"required": ["doctor", "admin"]}

    # reads only need scopes
    assert (await client.get(f"{API}/{patient['id']}")).status_code == 200


async def test_only_admin_archives(client, patient, as_role):
    await as_role("doctor")
    assert (await client.delete(f"{API}/{patient['id']}")).status_code == 403
    await as_role("admin")
    assert (await client.delete(f"{API}/{patient['id']}")).status_code == 204


async def test_staff_cannot_create_clinical_records(client, patient, as_role):
    await as_role("staff")
    assert (await client.post(API, json=patient_payload(nephroId="NL-777"))).status_code == 403
    resp = await client.post("/api/v1/visits", json={"patientId": patient["id"], "date": "2024-02-01", "visitType": "OPD"})
    assert resp.status_code == 403
    resp = await client.post("/api/v1/dialysis-sessions", json={
        "patientId": patient["id"], "dateOfSession": "2024-02-01", "typeOfDialysis": "Hemodialysis",
    })
    assert resp.status_code == 403


async def test_missing_scope(client, as_role):
    await as_role("doctor", scopes=("patients:read",))
    assert (await client.get(API)).status_code == 200
    resp = await client.post("/api/v1/calculators/kfre", json={"sex": "Male"})
    assert resp.status_code == 403


async def test_health(client):
    resp = await client.get("/api/v1/health")
    assert resp.json() == {"status": "ok"}
    assert resp.headers.get("x-request-id")


async def test_demoted_user_loses_write_access(client, patient, as_role):
    principal = await as_role("admin")
    # the admin demotes themselves; the next request sees the stored role
    resp = await client.put(f"/api/v1/users/{principal.user_id}/role", json={"role": "staff"})
    assert resp.json()["role"] == "staff"
    resp = await client.delete(f"{API}/{patient['id']}")
    assert resp.status_code == 403
    assert resp.json()["code"] == "permission-denied"


async def test_deactivated_user_is_denied(client, patient, as_role):
    principal = await as_role("doctor")
    await client.patch(f"/api/v1/users/{principal.user_id}", json={"isActive": False})
    assert (await client.patch(f"{API}/{patient['id']}", json={"firstName": "Changed"})).status_code == 403


async def test_caller_without_user_record_is_denied(client, patient):
    stranger = Principal(user_id=uuid.uuid4(), org_id=ORG_ID, roles=["admin"], scopes=["*"])
    app.dependency_overrides[get_principal] = lambda: stranger
    resp = await client.delete(f"{API}/{patient['id']}")
    assert resp.status_code == 403
    assert resp.json()["details"] == {"required": ["admin"]}
    # reads still go through
    assert (await client.get(f"{API}/{patient['id']}")).status_code == 200
