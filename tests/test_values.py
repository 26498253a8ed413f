import pytest
from nephrolite.core.casing import to_camel_keys, to_snake_keys
from nephrolite.core.paging import encode_cursor, decode_cursor
from nephrolite.core.values import parse_blood_pressure, merge_json, html_to_plain_text


def test_nested_keys_convert_both_ways():
    api = {"firstName": "A", "clinicalProfile": {"primaryDiagnosis": "CKD", "vaccinations": [{"nextDoseDate": None}]}}
    stored = to_snake_keys(api)
    assert stored == {"first_name": "A", "clinical_profile": {"primary_diagnosis": "CKD", "vaccinations": [{"next_dose_date": None}]}}
    assert to_camel_keys(stored) == api


def test_scalars_pass_through_casing():
    assert to_camel_keys("some_value") == "some_value"
    assert to_snake_keys([1, "x"]) == [1, "x"]


@pytest.mark.parametrize("value,expected", [
    ("120/80", (120, 80)),
    (" 140 / 90 ", (140, 90)),
    ("120", (None, None)),
    ("120/80/60", (None, None)),
    ("abc/80", (None, 80)),
    ("", (None, None)),
    (None, (None, None)),
])
def test_parse_blood_pressure(value, expected):
    assert parse_blood_pressure(value) == expected


def test_merge_json_null_removes_key_and_keeps_existing():
    existing = {"city": "Pune", "state": "MH", "district": "Haveli"}
    merged = merge_json(existing, {"city": "Mumbai", "state": None, "pincode": "400001"})
    assert merged == {"city": "Mumbai", "district": "Haveli", "pincode": "400001"}
    assert existing == {"city": "Pune", "state": "MH", "district": "Haveli"}


def test_merge_json_handles_missing_sides():
    assert merge_json(None, {"a": 1}) == {"a": 1}
    assert merge_json({"a": 1}, None) == {"a": 1}


def test_html_to_plain_text():
    html = "<p>Advice&nbsp;given</p><ul><li>Low salt</li><li>Fluids &lt; 1L</li></ul><br/>Review"
    assert html_to_plain_text(html) == "Advice given\n\n• Low salt\n• Fluids < 1L\nReview"
    assert html_to_plain_text(None) == ""


def test_cursor_round_trip_and_garbage():
    token = encode_cursor({"ts": "2024-05-01T10:30:00+00:00", "id": "abc"})
    assert decode_cursor(token) == {"ts": "2024-05-01T10:30:00+00:00", "id": "abc"}
    assert decode_cursor("not-a-cursor!") is None
    assert decode_cursor(None) is None
