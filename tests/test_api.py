from __future__ import annotations

import json

from fastapi.testclient import TestClient

from api.app import classify_error, create_app
from pipelines.discover_network import NetworkDiscoveryService
from services.introductions import IntroductionWriter


BODY = {
    "fwbContact": {"name": "Alex Rivera", "company": "TechCorp", "position": "VP Engineering"},
    "userProfile": {"name": "Sam Lee", "title": "Senior Software Engineer"},
    "searchDepth": "shallow",
}


def _client(fake_search, fake_llm, settings_factory, **llm_responses):
    llm = fake_llm(llm_responses)
    service = NetworkDiscoveryService(search=fake_search(), llm=llm, settings=settings_factory())
    return TestClient(create_app(service_factory=lambda: service, writer_factory=lambda: IntroductionWriter(llm)))


def test_health(fake_search, fake_llm, settings_factory):
    client = _client(fake_search, fake_llm, settings_factory)
    assert client.get("/health").json() == {"status": "ok"}


def test_validation_errors_return_400_with_all_details(fake_search, fake_llm, settings_factory):
    client = _client(fake_search, fake_llm, settings_factory)
    resp = client.post("/api/discover-fwb-network", json={"fwbContact": {"name": "Alex"}, "searchDepth": "x"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["error"] == "Invalid request data"
    assert len(body["details"]) == 4


def test_malformed_json_is_a_validation_error(fake_search, fake_llm, settings_factory):
    client = _client(fake_search, fake_llm, settings_factory)
    resp = client.post("/api/discover-fwb-network", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_discovery_returns_camel_case_payload(fake_search, fake_llm, settings_factory):
    extraction = json.dumps({"connections": [{"name": "Jane Roe", "title": "CTO", "company": "TechCorp"}]})
    client = _client(fake_search, fake_llm, settings_factory, connection_extraction=extraction)
    first = client.post("/api/discover-fwb-network", json=BODY)
    assert first.status_code == 200
    data = first.json()
    assert data["code"] == "OK"
    assert data["discoveredConnections"][0]["name"] == "Jane Roe"
    assert data["cached"] is False

    second = client.post("/api/discover-fwb-network", json=BODY).json()
    assert second["cached"] is True
    assert second["requestId"] != data["requestId"]


def test_missing_api_key_maps_to_api_key_error(settings_factory):
    def factory():
        raise RuntimeError("OPENAI_API_KEY required for text generation")

    client = TestClient(create_app(service_factory=factory))
    resp = client.post("/api/discover-fwb-network", json=BODY)
    assert resp.status_code == 500
    assert resp.json()["code"] == "API_KEY_ERROR"


def test_error_classification():
    assert classify_error(RuntimeError("Rate limit reached"))[0] == 429
    assert classify_error(RuntimeError("quota exceeded"))[1]["code"] == "RATE_LIMIT_ERROR"
    assert classify_error(TimeoutError("Request timed out"))[0] == 504
    status, body = classify_error(ValueError("boom"))
    assert status == 500 and body["code"] == "INTERNAL_ERROR"


def test_introduction_templates_endpoint(fake_search, fake_llm, settings_factory):
    templates = json.dumps({"introductionRequest": "Could you introduce me?", "emailSubject": "Intro?"})
    client = _client(fake_search, fake_llm, settings_factory, introduction_templates=templates)
    body = {
        "connection": {"name": "Jane Roe", "title": "CTO", "company": "TechCorp"},
        "fwbContact": BODY["fwbContact"],
        "userProfile": BODY["userProfile"],
    }
    resp = client.post("/api/introduction-templates", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["introductionRequest"] == "Could you introduce me?"
    assert data["emailSubject"] == "Intro?"
    assert "Jane Roe" in data["linkedInMessage"]
    assert data["followUpMessage"]


def test_introduction_templates_requires_connection(fake_search, fake_llm, settings_factory):
    client = _client(fake_search, fake_llm, settings_factory)
    resp = client.post("/api/introduction-templates", json={k: v for k, v in BODY.items() if k != "searchDepth"})
    assert resp.status_code == 400
    assert "connection is required" in resp.json()["details"]
