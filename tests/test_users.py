API = "/api/v1/users"


async def test_create_lowercases_email_and_rejects_duplicates(client):
    resp = await client.post(API, json={"email": "Dr.Iyer@Clinic.IN", "displayName": "Dr. Iyer", "role": "doctor"})
    assert resp.status_code == 201, resp.text
    user = resp.json()
    assert user["email"] == "dr.iyer@clinic.in"
    assert user["isActive"] is True

    resp = await client.post(API, json={"email": "dr.iyer@clinic.in", "displayName": "Someone else"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "already-exists"

    resp = await client.get(f"{API}/lookup", params={"email": "  DR.IYER@clinic.in "})
    assert resp.json()["id"] == user["id"]
    assert (await client.get(f"{API}/lookup", params={"email": "nobody@clinic.in"})).status_code == 404


async def test_list_filters(client):
    await client.post(API, json={"email": "b@clinic.in", "displayName": "Bela", "role": "nurse"})
    await client.post(API, json={"email": "a@clinic.in", "displayName": "Arun", "role": "doctor"})
    inactive = (await client.post(API, json={"email": "c@clinic.in", "displayName": "Chitra", "isActive": False})).json()

    assert [u["displayName"] for u in (await client.get(API)).json()] == ["Arun", "Bela"]
    everyone = (await client.get(API, params={"activeOnly": "false"})).json()
    assert [u["displayName"] for u in everyone] == ["Arun", "Bela", "Chitra"]
    nurses = (await client.get(API, params={"role": "nurse"})).json()
    assert [u["displayName"] for u in nurses] == ["Bela"]

    resp = await client.patch(f"{API}/{inactive['id']}", json={"isActive": True, "phoneNumber": "9800000000"})
    assert resp.json()["isActive"] is True
    assert resp.json()["role"] == "staff"


async def test_role_change_is_admin_only(client, as_role):
    user = (await client.post(API, json={"email": "n@clinic.in", "displayName": "Nita", "role": "nurse"})).json()

    resp = await client.put(f"{API}/{user['id']}/role", json={"role": "doctor"})
    assert resp.json()["role"] == "doctor"
    assert (await client.put(f"{API}/{user['id']}/role", json={"role": "superuser"})).status_code == 422

    await as_role("doctor")
    resp = await client.put(f"{API}/{user['id']}/role", json={"role": "admin"})
    assert resp.status_code == 403
    assert resp.json()["code"] == "permission-denied"
    assert (await client.post(API, json={"email": "x@clinic.in", "displayName": "X"})).status_code == 403
