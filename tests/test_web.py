"""Tests for the HTTP API."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from kinfinder.catalog import DEMO_CASE_ID, DEMO_SOURCE_ID, SourceCatalog
from kinfinder.config import Settings
from kinfinder.models import CandidateRecord
from kinfinder.orchestrator import SearchOrchestrator, build_default_orchestrator
from kinfinder.providers import CandidateProvider, ProviderUnavailable
from kinfinder.store import MemoryStore
from kinfinder.web.app import create_app


class DownProvider(CandidateProvider):
    name = "down"

    def generate(self, request, source):
        raise ProviderUnavailable("maintenance window")


class SlowProvider(CandidateProvider):
    """One candidate, after a per-case delay."""

    name = "slow"

    def __init__(self, delays):
        self.delays = delays

    def generate(self, request, source):
        return [CandidateRecord(
            id=f"{request.case_id}-1",
            record_id=f"{request.case_id}-R1",
            source_id=source.id,
            first_name="Mary",
            last_name="Smith",
            age=40,
            gender="F",
            relationship_type="Parent",
            confidence=85,
        )]

    async def fetch(self, request, source):
        await asyncio.sleep(self.delays.get(request.case_id, 0))
        return self.generate(request, source)


def slow_app():
    catalog = SourceCatalog(MemoryStore())
    catalog.register_provider("clearview-data", SlowProvider({"SLOW": 0.3}))
    return create_app(orchestrator=SearchOrchestrator(catalog, Settings(provider_attempts=1, retry_backoff=0)))


def down_app():
    catalog = SourceCatalog(MemoryStore())
    catalog.register_provider("clearview-data", DownProvider())
    return create_app(orchestrator=SearchOrchestrator(catalog, Settings(provider_attempts=1, retry_backoff=0)))


async def overlapping_posts(app, path, slow_body, fast_body):
    """POST slow_body, then fast_body while the first is still running."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        slow = asyncio.create_task(client.post(path, json=slow_body))
        await asyncio.sleep(0.05)
        fast = await client.post(path, json=fast_body)
        return await slow, fast


@pytest.fixture
def orchestrator():
    """Orchestrator with only the demo source enabled."""
    orchestrator = build_default_orchestrator(store=MemoryStore(), seed=5)
    for source in orchestrator.catalog.list():
        orchestrator.catalog.update(source.id, {"enabled": source.id == DEMO_SOURCE_ID})
    return orchestrator


@pytest.fixture
def client(orchestrator):
    """Create test client."""
    return TestClient(create_app(orchestrator=orchestrator))


PARENTS = {
    "case_id": DEMO_CASE_ID,
    "relationship_types": ["Parent"],
    "sources": ["all-enabled"],
    "min_confidence": 70,
}


class TestHealth:
    """Test health endpoint."""

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["sources_enabled"] == 1


class TestSearchEndpoint:
    """Test POST /api/v1/search."""

    def test_demo_parents(self, client):
        response = client.post("/api/v1/search", json=PARENTS)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ok"
        assert data["total_count"] == 2
        assert [r["full_name"] for r in data["results"]] == ["Lorelai Gilmore", "Christopher Hayden"]
        assert data["results"][0]["scores"]["match"] == 97
        assert data["facets"]["relationship_type"] == {"Parent": 2}

    def test_max_results(self, client):
        response = client.post("/api/v1/search", json={"case_id": DEMO_CASE_ID, "max_results": 3})
        data = response.json()
        assert data["returned_count"] == 3
        assert data["total_count"] == 23

    def test_invalid_sort_key(self, client):
        response = client.post("/api/v1/search", json={"case_id": DEMO_CASE_ID, "sort_by": "age"})
        assert response.status_code == 400
        assert response.json()["field"] == "sort_by"

    def test_unknown_source(self, client):
        response = client.post("/api/v1/search", json={"case_id": DEMO_CASE_ID, "sources": ["nowhere"]})
        assert response.status_code == 400
        assert response.json()["field"] == "sources"

    def test_inverted_age_range(self, client):
        response = client.post("/api/v1/search", json={"case_id": DEMO_CASE_ID, "age_range": [60, 20]})
        assert response.status_code == 400
        assert response.json()["field"] == "age_range"

    def test_missing_case_id(self, client):
        response = client.post("/api/v1/search", json={"relationship_types": ["Parent"]})
        assert response.status_code == 422

    def test_all_providers_down(self):
        client = TestClient(down_app())

        response = client.post("/api/v1/search", json={"case_id": "CASE-1", "sources": ["clearview-data"]})
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unavailable"
        assert data["errors"] == ["clearview-data: maintenance window"]

    @pytest.mark.asyncio
    async def test_concurrent_clients_both_served(self):
        """Overlapping searches from separate callers each get their own result."""
        slow, fast = await overlapping_posts(
            slow_app(), "/api/v1/search", {"case_id": "SLOW"}, {"case_id": "FAST"},
        )

        assert slow.status_code == 200
        assert fast.status_code == 200
        assert slow.json()["status"] == "ok"
        assert [r["record_id"] for r in slow.json()["results"]] == ["SLOW-R1"]
        assert [r["record_id"] for r in fast.json()["results"]] == ["FAST-R1"]

    @pytest.mark.asyncio
    async def test_same_session_superseded(self):
        """A client reusing its session id gets 409 for the older search."""
        slow, fast = await overlapping_posts(
            slow_app(),
            "/api/v1/search",
            {"case_id": "SLOW", "session_id": "desk-1"},
            {"case_id": "FAST", "session_id": "desk-1"},
        )

        assert fast.status_code == 200
        assert slow.status_code == 409
        assert slow.json()["status"] == "superseded"


class TestExportEndpoint:
    """Test POST /api/v1/search/export."""

    def test_csv_download(self, client):
        response = client.post("/api/v1/search/export?format=csv", json=PARENTS)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert f"kinship-candidates-{DEMO_CASE_ID}.csv" in response.headers["content-disposition"]

        lines = response.text.split("\n")
        assert lines[0].startswith("Name,Relationship,Age")
        assert lines[1].startswith('"Lorelai Gilmore","Mother"')
        assert len(lines) == 3

    def test_json_download(self, client):
        response = client.post("/api/v1/search/export?format=json", json=PARENTS)
        assert response.status_code == 200
        assert response.json()["facets"]["gender"] == {"F": 1, "M": 1}

    def test_bad_format(self, client):
        response = client.post("/api/v1/search/export?format=xlsx", json=PARENTS)
        assert response.status_code == 422

    @pytest.mark.parametrize("export_format", ["csv", "json"])
    def test_unavailable_is_503_not_download(self, export_format):
        client = TestClient(down_app())

        response = client.post(f"/api/v1/search/export?format={export_format}", json={"case_id": "CASE-1"})
        assert response.status_code == 503
        assert "content-disposition" not in response.headers
        assert response.json()["status"] == "unavailable"

    @pytest.mark.asyncio
    async def test_superseded_is_409_not_empty_file(self):
        slow, fast = await overlapping_posts(
            slow_app(),
            "/api/v1/search/export?format=csv",
            {"case_id": "SLOW", "session_id": "desk-1"},
            {"case_id": "FAST", "session_id": "desk-1"},
        )

        assert fast.status_code == 200
        assert fast.text.count("\n") == 1
        assert slow.status_code == 409
        assert "content-disposition" not in slow.headers

    @pytest.mark.asyncio
    async def test_concurrent_exports_both_download(self):
        slow, fast = await overlapping_posts(
            slow_app(), "/api/v1/search/export?format=csv", {"case_id": "SLOW"}, {"case_id": "FAST"},
        )

        assert slow.status_code == 200
        assert fast.status_code == 200
        assert "kinship-candidates-SLOW.csv" in slow.headers["content-disposition"]


class TestSourcesEndpoints:
    """Test source catalog endpoints."""

    def test_list(self, client):
        response = client.get("/api/v1/sources")
        assert response.status_code == 200
        ids = [s["id"] for s in response.json()]
        assert ids[0] == DEMO_SOURCE_ID
        assert "clearview-data" in ids

    def test_get_unknown(self, client):
        response = client.get("/api/v1/sources/nowhere")
        assert response.status_code == 404

    def test_patch_priority(self, client):
        response = client.patch("/api/v1/sources/clearview-data", json={"priority": 3})
        assert response.status_code == 200
        assert response.json()["priority"] == 3
        assert client.get("/api/v1/sources/clearview-data").json()["priority"] == 3

    def test_patch_camel_case(self, client):
        response = client.patch("/api/v1/sources/clearview-data", json={"costPerSearch": 2.25})
        assert response.status_code == 200
        assert response.json()["cost_per_search"] == 2.25

    @pytest.mark.parametrize("value", ["abc", 2.5, None])
    def test_patch_bad_priority(self, client, value):
        response = client.patch("/api/v1/sources/clearview-data", json={"priority": value})
        assert response.status_code == 400
        assert response.json()["field"] == "priority"
        assert client.get("/api/v1/sources/clearview-data").json()["priority"] == 1

    def test_patch_id_change(self, client):
        response = client.patch("/api/v1/sources/clearview-data", json={"id": "renamed"})
        assert response.status_code == 400
        assert response.json()["field"] == "id"

    def test_patch_unknown_source(self, client):
        response = client.patch("/api/v1/sources/nowhere", json={"enabled": True})
        assert response.status_code == 404

    def test_enable_changes_search(self, client):
        """Enabling a source via PATCH makes it part of the next search."""
        client.patch("/api/v1/sources/clearview-data", json={"enabled": True})
        data = client.post("/api/v1/search", json={"case_id": DEMO_CASE_ID}).json()
        assert "clearview-data" in data["sources_queried"]
