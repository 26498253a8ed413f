import pytest
from nephrolite.modules.clinical.calculators import (
    calculate_egfr, ckd_stage, albuminuria_category, disability_percentage, assess_disability, calculate_kfre,
)


def test_egfr_ckd_epi_2021():
    male = calculate_egfr(50, "Male", 1.0)
    assert 91 < male < 92.5
    female = calculate_egfr(60, "Female", 2.0)
    assert 27 < female < 28.5
    assert round(female, 2) == female


@pytest.mark.parametrize("egfr,stage", [
    (120, "G1"), (90, "G1"), (89.99, "G2"), (60, "G2"), (45, "G3a"), (44.9, "G3b"),
    (30, "G3b"), (15, "G4"), (14.99, "G5"), (3, "G5"),
])
def test_ckd_stage_boundaries(egfr, stage):
    assert ckd_stage(egfr) == stage


def test_albuminuria_units():
    assert albuminuria_category(29) == "A1"
    assert albuminuria_category(30) == "A2"
    assert albuminuria_category(300) == "A3"
    # mg/mmol is scaled by 8.8 before grading
    assert albuminuria_category(3, "mg/mmol") == "A1"
    assert albuminuria_category(5, "mg/mmol") == "A2"
    assert albuminuria_category(35, "mg/mmol") == "A3"


def test_disability_matrix():
    assert disability_percentage("G1", "A1") == 15
    assert disability_percentage("G2", "A2") == 40
    assert disability_percentage("G3a", "A1") == 40
    assert disability_percentage("G3b", "A3") == 80
    assert disability_percentage("G4", "A3") == 100
    assert disability_percentage("G5", "A1") == 100
    assert disability_percentage("G1", "A1", on_rrt=True) == 100


def test_assessment_includes_descriptions_and_advice():
    result = assess_disability(60, "Female", 2.0, 350)
    assert result["ckd_stage"] == "G4"
    assert result["albuminuria_category"] == "A3"
    assert result["disability_percentage"] == 100
    assert result["ckd_stage_description"].startswith("Severely decreased")
    assert "renal replacement therapy planning" in result["recommendations"]
    assert "High disability percentage (100%)" in result["recommendations"]

    rrt = assess_disability(40, "Male", 1.0, 10, on_rrt=True)
    assert rrt["disability_percentage"] == 100
    assert rrt["recommendations"].startswith("Patient is on Renal Replacement Therapy")


def test_kfre_not_applicable():
    assert calculate_kfre(60, "Male", 60, 300) == {"two_year": None, "five_year": None}
    assert calculate_kfre(60, "Male", 25, None) == {"two_year": None, "five_year": None}
    assert calculate_kfre(None, "Male", 25, 300) == {"two_year": None, "five_year": None}


def test_kfre_risks_move_with_inputs():
    base = calculate_kfre(60, "Male", 25, 300)
    assert 0 < base["two_year"] < base["five_year"] < 100
    assert calculate_kfre(60, "Female", 25, 300)["five_year"] < base["five_year"]
    assert calculate_kfre(60, "Male", 15, 300)["five_year"] > base["five_year"]
    assert calculate_kfre(60, "Male", 25, 1000)["five_year"] > base["five_year"]


async def test_calculator_endpoints(client):
    resp = await client.post("/api/v1/calculators/disability", json={
        "age": 50, "sex": "Male", "serumCreatinine": 1.0, "albuminuria": 5, "albuminuriaUnit": "mg/mmol",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["ckdStage"] == "G1"
    assert body["albuminuriaCategory"] == "A2"
    assert body["disabilityPercentage"] == 40
    assert body["onRrt"] is False

    resp = await client.post("/api/v1/calculators/kfre", json={"age": 60, "sex": "Male", "egfr": 75, "uacr": 30})
    assert resp.json() == {"twoYear": None, "fiveYear": None}
