API = "/api/v1/visits"


def visit_payload(patient_id: str, **overrides) -> dict:
    data = {
        "patientId": patient_id,
        "date": "2024-02-01",
        "visitType": "OPD",
        "chiefComplaint": "Swelling of feet",
        "diagnoses": [{"name": "CKD stage 4", "icdCode": "N18.4", "type": "Primary"}],
        "vitalSigns": {"bloodPressure": "140/90", "pulse": 82},
        "clinicalData": {"history": "Known diabetic", "medications": [{"name": "Amlodipine", "dosage": "5 mg"}]},
    }
    data.update(overrides)
    return data


async def test_create_visit_parses_blood_pressure(client, patient):
    resp = await client.post(API, json=visit_payload(patient["id"]))
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert (body["systolicBp"], body["diastolicBp"]) == (140, 90)
    assert body["vitalSigns"]["bloodPressure"] == "140/90"
    assert body["diagnoses"][0]["icdCode"] == "N18.4"
    assert body["clinicalData"]["medications"][0]["name"] == "Amlodipine"


async def test_blood_pressure_falls_back_to_clinical_data(client, patient):
    resp = await client.post(API, json=visit_payload(
        patient["id"], vitalSigns={}, clinicalData={"systolicBp": "130", "diastolicBp": "85"},
    ))
    body = resp.json()
    assert (body["systolicBp"], body["diastolicBp"]) == (130, 85)


async def test_visit_for_missing_patient(client):
    resp = await client.post(API, json=visit_payload("00000000-0000-0000-0000-000000000000"))
    assert resp.status_code == 404
    assert resp.json()["code"] == "not-found"


async def test_list_recent_and_update(client, patient):
    first = (await client.post(API, json=visit_payload(patient["id"], date="2024-01-01"))).json()
    await client.post(API, json=visit_payload(patient["id"], date="2024-03-01"))

    listed = (await client.get(API, params={"patientId": patient["id"]})).json()
    assert [v["date"] for v in listed] == ["2024-03-01", "2024-01-01"]
    recent = (await client.get(f"{API}/recent", params={"count": 1})).json()
    assert [v["date"] for v in recent] == ["2024-03-01"]

    resp = await client.patch(f"{API}/{first['id']}", json={"vitalSigns": {"bloodPressure": "120/80"}})
    body = resp.json()
    assert (body["systolicBp"], body["diastolicBp"]) == (120, 80)
    assert body["vitalSigns"]["pulse"] == 82
    assert body["chiefComplaint"] == "Swelling of feet"

    assert (await client.delete(f"{API}/{first['id']}")).status_code == 204
    assert (await client.get(f"{API}/{first['id']}")).status_code == 404
