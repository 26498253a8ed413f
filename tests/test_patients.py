import collections.abc
import typing

from conftest import patient_payload
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.patients.service import PatientService

API = "/api/v1/patients"


async def test_create_patient_returns_camel_case(client, patient):
    assert patient["nephroId"] == "NL-001"
    assert patient["firstName"] == "Asha"
    assert patient["address"]["city"] == "Pune"
    assert patient["clinicalProfile"]["bloodGroup"] == "B+"
    assert patient["patientStatus"] == "OPD"
    assert patient["registrationDate"]
    assert patient["lastDialysisDate"] is None


async def test_duplicate_nephro_id_conflicts(client, patient):
    resp = await client.post(API, json=patient_payload(firstName="Other"))
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "already-exists"
    assert body["details"] == {"nephroId": "NL-001"}


async def test_invalid_payload_is_rejected(client):
    resp = await client.post(API, json=patient_payload(dob="12/04/1980"))
    assert resp.status_code == 422
    resp = await client.post(API, json=patient_payload(gender="Unknown"))
    assert resp.status_code == 422


async def test_get_and_lookup(client, patient):
    resp = await client.get(f"{API}/{patient['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == patient["id"]

    resp = await client.get(f"{API}/lookup", params={"nephroId": "NL-001"})
    assert resp.json()["id"] == patient["id"]

    resp = await client.get(f"{API}/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404
    resp = await client.get(f"{API}/lookup", params={"nephroId": "NL-404"})
    assert resp.status_code == 404


async def test_search_by_name_prefix(client, patient):
    await client.post(API, json=patient_payload(nephroId="NL-002", firstName="Rahul", lastName="Mehta"))
    await client.post(API, json=patient_payload(nephroId="NL-003", firstName="Ashok", lastName="Nair"))

    resp = await client.get(f"{API}/search", params={"q": "ash"})
    names = [p["firstName"] for p in resp.json()]
    assert names == ["Asha", "Ashok"]

    resp = await client.get(f"{API}/search", params={"q": "Rahul Me"})
    assert [p["nephroId"] for p in resp.json()] == ["NL-002"]

    # wildcard characters are matched literally
    resp = await client.get(f"{API}/search", params={"q": "%"})
    assert resp.json() == []


async def test_keyset_pages(client):
    for i in range(5):
        resp = await client.post(API, json=patient_payload(nephroId=f"NL-10{i}"))
        assert resp.status_code == 201

    seen = []
    cursor = None
    while True:
        params = {"pageSize": 2}
        if cursor:
            params["cursor"] = cursor
        body = (await client.get(f"{API}/page", params=params)).json()
        seen += [p["nephroId"] for p in body["items"]]
        cursor = body["nextCursor"]
        if not cursor:
            break
    assert seen == ["NL-104", "NL-103", "NL-102", "NL-101", "NL-100"]


async def test_malformed_cursor(client):
    resp = await client.get(f"{API}/page", params={"cursor": "not-a-cursor"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid-argument"


async def test_update_merges_nested_objects(client, patient):
    resp = await client.patch(f"{API}/{patient['id']}", json={
        "address": {"pincode": "411001"},
        "clinicalProfile": {"tags": ["diabetic"]},
        "patientStatus": "IPD",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["address"]["city"] == "Pune"
    assert body["address"]["pincode"] == "411001"
    assert body["clinicalProfile"]["bloodGroup"] == "B+"
    assert body["clinicalProfile"]["tags"] == ["diabetic"]
    assert body["patientStatus"] == "IPD"


async def test_update_to_taken_nephro_id(client, patient):
    other = (await client.post(API, json=patient_payload(nephroId="NL-002"))).json()
    resp = await client.patch(f"{API}/{other['id']}", json={"nephroId": "NL-001"})
    assert resp.status_code == 409
    # keeping its own id is fine
    resp = await client.patch(f"{API}/{other['id']}", json={"nephroId": "NL-002", "firstName": "Kiran"})
    assert resp.status_code == 200


async def test_delete_archives_patient(client, patient):
    resp = await client.delete(f"{API}/{patient['id']}")
    assert resp.status_code == 204
    assert (await client.get(f"{API}/{patient['id']}")).status_code == 404
    assert (await client.get(API)).json() == []
    assert (await client.delete(f"{API}/{patient['id']}")).status_code == 404

    # archived nephro ids stay reserved
    resp = await client.post(API, json=patient_payload())
    assert resp.status_code == 409


async def test_writes_are_audited(client, patient):
    await client.patch(f"{API}/{patient['id']}", json={"contact": "9876500000"})
    await client.delete(f"{API}/{patient['id']}")

    events = (await client.get("/api/v1/audit")).json()
    actions = [e["action"] for e in events]
    assert set(actions) == {"CREATE_PATIENT", "UPDATE_PATIENT", "DELETE_PATIENT"}
    assert all(e["resourceId"] == patient["id"] for e in events)

    resp = await client.get("/api/v1/audit", params={"action": "UPDATE_PATIENT"})
    [update] = resp.json()
    assert update["details"] == {"fields": ["contact"]}
    assert set(update) == {"id", "actorUserId", "action", "resourceType", "resourceId", "success", "details", "occurredAt"}


async def test_update_null_clears_optional_fields(client, patient):
    resp = await client.patch(f"{API}/{patient['id']}", json={
        "contact": None,
        "address": {"state": None},
        "firstName": None,
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["contact"] is None
    assert body["address"]["state"] is None
    assert body["address"]["city"] == "Pune"
    # required columns ignore null
    assert body["firstName"] == "Asha"


def test_page_return_hints_resolve():
    hints = typing.get_type_hints(PatientService.page)
    assert typing.get_origin(hints["return"]) is tuple
    assert typing.get_origin(typing.get_type_hints(PatientRepository.page)["return"]) is collections.abc.Sequence
