"""Tests for the HTTP surface (FastAPI TestClient)."""

import pytest
from fastapi.testclient import TestClient

from workflow_insights.adapters.memory_store import MemoryInsightStore
from workflow_insights.api import create_app
from workflow_insights.config import GenerationSettings


class _FailingDirectory:
    def resolve_os(self, endpoint_ids):
        raise ConnectionError("metadata service down")


def _body(**overrides):
    body = {
        "insight_type": "incompatible_antivirus",
        "endpoint_ids": ["e1", "e2", "ghost"],
        "connector_id": "conn-1",
        "model": "gpt-4o",
        "findings": [
            {"group": "AV-X", "events": [
                {"id": "ev1", "endpointId": "e1", "value": "/usr/bin/av"},
                {"id": "ev2", "endpointId": "e2", "value": "/usr/bin/av"},
            ]},
        ],
    }
    body.update(overrides)
    return body


@pytest.fixture
def api_store():
    return MemoryInsightStore()


@pytest.fixture
def client(directory, api_store):
    app = create_app(directory=directory, store=api_store, settings=GenerationSettings())
    return TestClient(app)


class TestGenerate:
    def test_generate_persists_records(self, client, api_store):
        resp = client.post("/v1/insights/generate", json=_body())
        assert resp.status_code == 200
        data = resp.json()
        assert data["records_generated"] == 2
        assert data["unresolved_count"] == 1
        assert data["unresolved_ids"] == ["ghost"]
        assert api_store.count_insights() == 2
        targets = sorted(tuple(i["target"]["ids"]) for i in data["insights"])
        assert targets == [("e1",), ("e2",)]

    def test_signature_alias_accepted(self, client):
        body = _body(findings=[{"group": "AV-S", "events": [{"value": "/x", "signature": "SIG1"}]}])
        data = client.post("/v1/insights/generate", json=body).json()
        fields = {i["remediation"]["exception_list_items"][0]["entries"][0]["field"] for i in data["insights"]}
        assert fields == {"process.code_signature", "process.Ext.code_signature"}

    def test_unknown_category_is_400(self, client, api_store):
        resp = client.post("/v1/insights/generate", json=_body(insight_type="bogus"))
        assert resp.status_code == 400
        assert "bogus" in resp.json()["error"]
        assert api_store.count_insights() == 0

    def test_validation_error_is_400(self, client):
        resp = client.post("/v1/insights/generate", json=_body(endpoint_ids=[]))
        assert resp.status_code == 400
        assert "endpoint_ids" in resp.json()["error"]

    def test_directory_outage_is_503(self, api_store):
        app = create_app(directory=_FailingDirectory(), store=api_store, settings=GenerationSettings())
        resp = TestClient(app).post("/v1/insights/generate", json=_body())
        assert resp.status_code == 503
        assert "metadata service down" in resp.json()["error"]
        assert api_store.count_insights() == 0


class TestQuery:
    def test_list_insights(self, client):
        client.post("/v1/insights/generate", json=_body())
        resp = client.get("/v1/insights", params={"target_id": "e2"})
        assert resp.status_code == 200
        docs = resp.json()
        assert len(docs) == 1
        assert docs[0]["target"]["ids"] == ["e2"]

    def test_list_limit_is_bounded(self, client):
        client.post("/v1/insights/generate", json=_body())
        assert len(client.get("/v1/insights", params={"limit": 1}).json()) == 1
        for bad in (0, -5, 1001):
            resp = client.get("/v1/insights", params={"limit": bad})
            assert resp.status_code == 400
            assert "limit" in resp.json()["error"]

    def test_categories(self, client):
        resp = client.get("/v1/insights/categories")
        assert resp.json() == {"categories": ["incompatible_antivirus", "noisy_process_tree"]}

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["stored_insights"] == 0

    def test_metrics(self, client):
        client.post("/v1/insights/generate", json=_body())
        text = client.get("/metrics").text
        assert 'insights_records_generated_total{type="incompatible_antivirus"} 2' in text
        assert "insights_http_requests_total" in text
