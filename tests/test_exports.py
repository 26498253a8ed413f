import csv
import io

from nephrolite.core.base import row_to_dict
from nephrolite.modules.exports.service import flatten, rows_to_csv
from nephrolite.modules.users.models import User


def test_flatten_nests_dicts_and_serialises_lists():
    row = {"id": 1, "address": {"city": "Pune", "geo": {"lat": 18.5}}, "tags": ["a", "b"], "note": None}
    assert flatten(row) == {
        "id": 1,
        "address.city": "Pune",
        "address.geo.lat": 18.5,
        "tags": '["a", "b"]',
        "note": None,
    }


def test_row_to_dict_covers_every_column():
    user = User(email="a@clinic.in", display_name="A", role="nurse")
    data = row_to_dict(user)
    assert set(data) == {c.key for c in User.__table__.columns}
    assert (data["email"], data["role"]) == ("a@clinic.in", "nurse")


def test_rows_to_csv_unions_headers_in_first_seen_order():
    out = rows_to_csv([{"a": 1, "b": {"c": 2}}, {"a": 3, "d": None}])
    rows = list(csv.reader(io.StringIO(out)))
    assert rows[0] == ["a", "b.c", "d"]
    assert rows[1] == ["1", "2", ""]
    assert rows[2] == ["3", "", ""]


async def test_patients_csv(client, patient):
    resp = await client.get("/api/v1/exports/patients.csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    [row] = list(csv.DictReader(io.StringIO(resp.text)))
    assert row["nephroId"] == "NL-001"
    assert row["address.city"] == "Pune"
    assert row["clinicalProfile.bloodGroup"] == "B+"
    assert "orgId" not in row
    assert "deletedAt" not in row


async def test_unknown_table_rejected(client):
    resp = await client.get("/api/v1/exports/users.csv")
    assert resp.status_code == 422


async def test_patient_bundle(client, patient):
    await client.post("/api/v1/dialysis-sessions", json={
        "patientId": patient["id"], "dateOfSession": "2024-02-01", "typeOfDialysis": "Hemodialysis",
    })
    resp = await client.get(f"/api/v1/exports/patients/{patient['id']}.json")
    assert resp.status_code == 200
    bundle = resp.json()
    assert bundle["patient"]["nephroId"] == "NL-001"
    assert bundle["visits"] == []
    assert len(bundle["dialysisSessions"]) == 1
    assert set(bundle) == {"patient", "visits", "dialysisSessions", "investigationRecords", "interventions", "appointments"}

    resp = await client.get("/api/v1/exports/patients/00000000-0000-0000-0000-000000000000.json")
    assert resp.status_code == 404
