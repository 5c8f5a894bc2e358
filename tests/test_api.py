"""Tests for the FastAPI REST endpoints."""

import pytest
from fastapi.testclient import TestClient

from docscan.api.app import app


@pytest.fixture
def client() -> TestClient:
    """Create a FastAPI test client."""
    return TestClient(app)


def _payload(*texts: str, confidence: float = 0.95) -> list[dict]:
    """Build fragment JSON objects stacked vertically."""
    return [
        {
            "text": text,
            "x": 0,
            "y": i * 30,
            "width": 100,
            "height": 20,
            "confidence": confidence,
        }
        for i, text in enumerate(texts)
    ]


_AADHAAR = _payload("Government of India", "2341 2341 2346", "John Doe")


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert isinstance(data["tesseract_available"], bool)


class TestDocumentTypesEndpoint:
    """Tests for the /document-types endpoint."""

    def test_lists_every_type(self, client: TestClient) -> None:
        response = client.get("/document-types")
        assert response.status_code == 200
        types = response.json()["document_types"]
        assert len(types) == 14
        assert types[0]["identifier"] == "aadhaar"
        assert types[0]["display_name"] == "Aadhaar Card"
        assert types[0]["confidence_threshold"] == 0.85
        assert types[-1]["contains_pii"] is False


class TestScanEndpoint:
    """Tests for the /scan endpoint."""

    def test_scan_success_masks_identifiers(self, client: TestClient) -> None:
        response = client.post("/scan", json={"fragments": _AADHAAR})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["document"]["kind"] == "aadhaar"
        assert data["document"]["aadhaar_number"]["value"] == "XXXX-XXXX-2346"
        assert data["summary"]["name"] == "John Doe"

    def test_scan_unmasked(self, client: TestClient) -> None:
        response = client.post(
            "/scan", json={"fragments": _AADHAAR, "mask_sensitive_data": False}
        )
        data = response.json()
        assert data["document"]["aadhaar_number"]["value"] == "234123412346"

    def test_threshold_override(self, client: TestClient) -> None:
        response = client.post(
            "/scan", json={"fragments": _AADHAAR, "confidence_threshold": 0.95}
        )
        data = response.json()
        assert data["status"] == "unclear"
        assert data["raw_text"] == "Government of India 2341 2341 2346 John Doe"

    def test_allowed_types(self, client: TestClient) -> None:
        response = client.post(
            "/scan",
            json={
                "fragments": _payload("4111111111111111"),
                "allowed_types": ["debit_card"],
            },
        )
        data = response.json()
        assert data["status"] == "success"
        assert data["document"]["card_number"]["value"] == "4111 ******** 1111"

    def test_empty_fragments(self, client: TestClient) -> None:
        response = client.post("/scan", json={"fragments": []})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "error"
        assert data["error_type"] == "OcrProcessingFailed"
        assert data["message"] == "OCR processing failed: No text detected"

    def test_invalid_confidence(self, client: TestClient) -> None:
        fragments = _payload("hello", confidence=1.5)
        response = client.post("/scan", json={"fragments": fragments})
        assert response.status_code == 422


class TestClassifyEndpoint:
    """Tests for the /classify endpoint."""

    def test_classify_card(self, client: TestClient) -> None:
        response = client.post(
            "/classify", json={"fragments": _payload("4111111111111111")}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["document_type"] == "credit_card"
        assert data["display_name"] == "Credit Card"
        assert data["scores"]["credit_card"] == data["scores"]["debit_card"]

    def test_unclassified(self, client: TestClient) -> None:
        response = client.post("/classify", json={"fragments": _payload("hello")})
        data = response.json()
        assert data["document_type"] is None
        assert data["scores"] == {}


class TestExtractEndpoint:
    """Tests for the /extract/{document_type} endpoint."""

    def test_extract_pan(self, client: TestClient) -> None:
        response = client.post(
            "/extract/pan", json={"fragments": _payload("ABCDE1234F")}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["document_type"] == "pan"
        assert data["document"]["pan_number"]["value"] == "XXXXX1234X"
        assert data["summary"]["pan_number"] == "XXXXX1234X"

    def test_extract_without_match(self, client: TestClient) -> None:
        response = client.post("/extract/pan", json={"fragments": _payload("hello")})
        assert response.status_code == 200
        assert response.json()["document"] is None

    def test_extract_empty(self, client: TestClient) -> None:
        response = client.post("/extract/aadhaar", json={"fragments": []})
        assert response.status_code == 400

    def test_extract_unknown_type(self, client: TestClient) -> None:
        response = client.post(
            "/extract/library_card", json={"fragments": _payload("hello")}
        )
        assert response.status_code == 422
