from fastapi.testclient import TestClient

from tariff_engine.api.app import app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["guarantee_tiers"][0] == 5000


def test_sectors():
    r = client.get("/sectors")
    assert r.status_code == 200
    assert len(r.json()) == 9

    r = client.get("/sectors/B")
    assert r.status_code == 200
    assert r.json()["risk_tier"] == "very-high"

    assert client.get("/sectors/Z").status_code == 404


def test_quote_with_form_field_names():
    r = client.post(
        "/quote",
        json={
            "employees_count": 5,
            "ctn_code": "D",
            "guarantee_amount": 150000,
            "ipp_type": "IP3 & IP4",
            "had_ip_gt_10_last_4y": False,
        },
    )
    assert r.status_code == 200
    body = r.json()
    assert body["result"]["valid"] is True
    assert body["result"]["diagnostics"][0]["code"] == "GUARANTEE_DISPROPORTIONATE"
    assert body["result"]["premium_excluding_tax"] == 50.0


def test_invalid_questionnaire_is_not_an_http_error():
    r = client.post("/quote", json={"employee_count": 10001, "sector_code": "D", "guarantee_amount": 20000, "coverage_type": "full"})
    assert r.status_code == 200
    body = r.json()
    assert body["result"]["valid"] is False
    assert body["result"]["premium_excluding_tax"] == 0.0
    assert body["result"]["breakdown"] is None


def test_scenarios_endpoint():
    r = client.post(
        "/scenarios",
        json={
            "employee_count": 50,
            "sector_code": "D",
            "guarantee_amount": 5000,
            "coverage_type": "full",
            "include_breakdown": False,
        },
    )
    assert r.status_code == 200
    sc = r.json()["scenarios"]
    assert sc["lower_guarantee"]["premium_excluding_tax"] == sc["current"]["premium_excluding_tax"]
    assert "breakdown" not in sc["current"]
