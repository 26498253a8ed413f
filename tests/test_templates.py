API = "/api/v1/templates"

TEMPLATE = {
    "templateName": "CKD follow-up",
    "templateType": "Discharge Summary",
    "diagnoses": [{"name": "CKD stage 3b", "icdCode": "N18.32"}],
    "history": "Known hypertensive",
    "medications": [{"name": "Telmisartan", "dosage": "40 mg", "frequency": "OD"}],
    "dischargeInstructions": "Low salt diet",
}


async def test_save_get_and_delete(client):
    assert (await client.put(API, json=TEMPLATE)).status_code == 204
    await client.put(API, json={"templateName": "Biopsy opinion", "templateType": "Opinion Report", "opinionText": "Proceed"})

    templates = (await client.get(API)).json()
    assert sorted(templates) == ["Biopsy opinion", "CKD follow-up"]
    saved = templates["CKD follow-up"]
    assert saved["templateName"] == "CKD follow-up"
    assert saved["templateType"] == "Discharge Summary"
    assert saved["diagnoses"][0]["icdCode"] == "N18.32"
    assert saved["medications"][0]["frequency"] == "OD"
    assert saved["dischargeInstructions"] == "Low salt diet"

    # saving under the same name replaces the content
    await client.put(API, json={**TEMPLATE, "history": "Diabetic"})
    assert (await client.get(API)).json()["CKD follow-up"]["history"] == "Diabetic"

    assert (await client.delete(f"{API}/CKD follow-up")).status_code == 204
    assert (await client.delete(f"{API}/CKD follow-up")).status_code == 404
    assert list((await client.get(API)).json()) == ["Biopsy opinion"]


async def test_templates_are_per_user(client, as_role):
    await client.put(API, json=TEMPLATE)
    await as_role("doctor")
    assert (await client.get(API)).json() == {}


async def test_template_type_is_checked(client):
    resp = await client.put(API, json={**TEMPLATE, "templateType": "Prescription"})
    assert resp.status_code == 422


async def test_master_diagnoses(client):
    resp = await client.put(f"{API}/master-diagnoses", json={
        "clinicalDiagnosis": "Diabetic kidney disease",
        "icdMappings": [{"icdCode": "E11.21", "icdName": "Type 2 diabetes with diabetic nephropathy"}],
    })
    assert resp.status_code == 200
    created = resp.json()

    resp = await client.put(f"{API}/master-diagnoses", json={
        "clinicalDiagnosis": "Diabetic kidney disease",
        "icdMappings": [{"icdCode": "E11.22", "icdName": "Type 2 diabetes with CKD"}],
    })
    assert resp.json()["id"] == created["id"]

    listed = (await client.get(f"{API}/master-diagnoses")).json()
    assert len(listed) == 1
    assert listed[0]["icdMappings"] == [{"icdCode": "E11.22", "icdName": "Type 2 diabetes with CKD"}]

    assert (await client.delete(f"{API}/master-diagnoses/{created['id']}")).status_code == 204
    assert (await client.get(f"{API}/master-diagnoses")).json() == []
