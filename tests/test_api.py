"""
Tests for the checklist API endpoints.

Tests cover:
- Health check
- Multipart upload endpoint
- JSON XML endpoint
- Error mapping (400 / 413 / 415 / 503)
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """Return a TestClient for the FastAPI app."""
    from api_server import app
    return TestClient(app)


class TestHealth:
    """Tests for GET /health."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestUploadEndpoint:
    """Tests for POST /api/mortgage/checklist."""

    def test_upload_generates_checklist(self, client, mismo_xml):
        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.xml", mismo_xml(), "application/xml")},
            data={"reference_date": "2026-02-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reference_date"] == "2026-02-01"
        assert data["source"] == "loan.xml"
        assert data["summary"]["borrower_names"] == ["Jane Doe"]
        assert {"income", "general", "assets", "credit"} <= set(data)
        assert data["general"][0]["status"] == "required"

    def test_malformed_xml_returns_400(self, client):
        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.xml", "<MESSAGE>", "application/xml")},
            data={"reference_date": "2026-02-01"},
        )

        assert response.status_code == 400
        assert "Unable to parse MISMO XML" in response.json()["detail"]

    def test_wrong_extension_returns_415(self, client, mismo_xml):
        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.pdf", mismo_xml(), "application/pdf")},
        )

        assert response.status_code == 415

    def test_oversized_upload_returns_413(self, client, mismo_xml, monkeypatch):
        monkeypatch.setenv("MISMO_MAX_UPLOAD_BYTES", "100")

        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.xml", mismo_xml(), "application/xml")},
        )

        assert response.status_code == 413

    def test_bad_reference_date_returns_400(self, client, mismo_xml):
        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.xml", mismo_xml(), "application/xml")},
            data={"reference_date": "02/01/2026"},
        )

        assert response.status_code == 400

    def test_disabled_returns_503(self, client, mismo_xml, monkeypatch):
        monkeypatch.setenv("CHECKLIST_ENABLED", "false")

        response = client.post(
            "/api/mortgage/checklist",
            files={"file": ("loan.xml", mismo_xml(), "application/xml")},
        )

        assert response.status_code == 503


class TestXmlEndpoint:
    """Tests for POST /api/mortgage/checklist/xml."""

    def test_json_body(self, client, mismo_xml):
        response = client.post(
            "/api/mortgage/checklist/xml",
            json={"xml": mismo_xml(mortgage_type="FHA"), "reference_date": "2026-02-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["program"] == "fha"
        assert "CAIVRS clearance" in [item["name"] for item in data["general"]]

    def test_defaults_reference_date(self, client, mismo_xml):
        response = client.post("/api/mortgage/checklist/xml", json={"xml": mismo_xml()})

        assert response.status_code == 200
        assert response.json()["reference_date"]

    def test_malformed_xml_returns_400(self, client):
        response = client.post("/api/mortgage/checklist/xml", json={"xml": "nope"})

        assert response.status_code == 400

    def test_missing_xml_returns_422(self, client):
        response = client.post("/api/mortgage/checklist/xml", json={})

        assert response.status_code == 422
