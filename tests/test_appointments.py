API = "/api/v1/appointments"


def appointment_payload(patient_id: str, **overrides) -> dict:
    data = {
        "patientId": patient_id,
        "date": "2024-02-01",
        "time": "10:30",
        "type": "Follow-up",
        "doctorName": "Dr. Iyer",
    }
    data.update(overrides)
    return data


async def test_patient_name_is_filled_in(client, patient):
    resp = await client.post(API, json=appointment_payload(patient["id"]))
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["patientName"] == "Asha Verma"
    assert body["status"] == "Scheduled"

    resp = await client.post(API, json=appointment_payload(patient["id"], patientName="A. Verma"))
    assert resp.json()["patientName"] == "A. Verma"


async def test_invalid_time_and_missing_patient(client, patient):
    assert (await client.post(API, json=appointment_payload(patient["id"], time="10.30am"))).status_code == 422
    resp = await client.post(API, json=appointment_payload("00000000-0000-0000-0000-000000000000"))
    assert resp.status_code == 404


async def test_by_date_orders_by_time(client, patient):
    await client.post(API, json=appointment_payload(patient["id"], time="14:00"))
    await client.post(API, json=appointment_payload(patient["id"], time="09:15"))
    await client.post(API, json=appointment_payload(patient["id"], date="2024-02-02", time="08:00"))

    day = (await client.get(f"{API}/by-date/2024-02-01")).json()
    assert [a["time"] for a in day] == ["09:15", "14:00"]
    assert (await client.get(f"{API}/by-date/01-02-2024")).status_code == 422


async def test_status_change_and_filters(client, patient):
    created = (await client.post(API, json=appointment_payload(patient["id"]))).json()
    resp = await client.post(f"{API}/{created['id']}/status", json={"status": "Completed"})
    assert resp.json()["status"] == "Completed"
    assert (await client.post(f"{API}/{created['id']}/status", json={"status": "Done"})).status_code == 422

    assert len((await client.get(API, params={"status": "Completed"})).json()) == 1
    assert (await client.get(API, params={"status": "Scheduled"})).json() == []

    resp = await client.patch(f"{API}/{created['id']}", json={"notes": "Bring reports"})
    assert resp.json()["notes"] == "Bring reports"
    assert resp.json()["status"] == "Completed"

    assert (await client.delete(f"{API}/{created['id']}")).status_code == 204
    assert (await client.get(API)).json() == []


async def test_interventions(client, patient):
    resp = await client.post("/api/v1/interventions", json={
        "patientId": patient["id"],
        "date": "2024-02-05",
        "type": "Kidney Biopsy",
        "details": {"side": "Left", "ultrasoundGuided": True},
        "attachments": [{"name": "biopsy.pdf", "url": "https://files.example/biopsy.pdf"}],
    })
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["details"] == {"side": "Left", "ultrasoundGuided": True}

    resp = await client.patch(f"/api/v1/interventions/{created['id']}", json={
        "details": {"cores": "2"}, "complications": "Minor hematoma",
    })
    body = resp.json()
    assert body["details"] == {"side": "Left", "ultrasoundGuided": True, "cores": "2"}
    assert body["complications"] == "Minor hematoma"

    listed = (await client.get("/api/v1/interventions", params={"patientId": patient["id"]})).json()
    assert [i["id"] for i in listed] == [created["id"]]
    assert (await client.post("/api/v1/interventions", json={
        "patientId": patient["id"], "date": "2024-02-05", "type": "Appendectomy",
    })).status_code == 422

    assert (await client.delete(f"/api/v1/interventions/{created['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/interventions/{created['id']}")).status_code == 404
