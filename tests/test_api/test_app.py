"""Tests for the HTTP API with agents replaced by mocks."""

import io
import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

TRANSCRIPT = ("Operator: Good morning and welcome to the Acme fourth quarter call. " * 4).encode()


@pytest.fixture
def financial_agent(financial_result) -> MagicMock:
    agent = MagicMock()
    agent.extract.return_value = financial_result
    return agent


@pytest.fixture
def earnings_agent(earnings_payload: dict) -> MagicMock:
    from research_portal.agents.schemas.earnings import EarningsAnalysisResult

    agent = MagicMock()
    agent.analyze.return_value = EarningsAnalysisResult.model_validate(earnings_payload)
    return agent


@pytest.fixture
def client(financial_agent: MagicMock, earnings_agent: MagicMock):
    from research_portal.api.app import app, get_earnings_agent, get_financial_agent

    app.dependency_overrides[get_financial_agent] = lambda: financial_agent
    app.dependency_overrides[get_earnings_agent] = lambda: earnings_agent
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestExtractFinancial:
    """POST /api/extract-financial"""

    def test_success_envelope(self, client: TestClient, financial_agent: MagicMock) -> None:
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["documentName"] == "acme.txt"
        assert body["data"]["companyName"] == "Acme Industrial Corp."
        assert body["data"]["lineItems"][0]["standardLabel"] == "Total Revenue"
        assert isinstance(body["processingTime"], float)

        text, truncated = financial_agent.extract.call_args.args
        assert text.startswith("Operator:")
        assert truncated is False

    def test_truncated_document_noted(
        self,
        client: TestClient,
        financial_agent: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        clear_settings,
    ) -> None:
        monkeypatch.setenv("MAX_DOCUMENT_CHARS", "150")
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 200
        notes = response.json()["data"]["extractionNotes"]
        assert notes.startswith("[Document truncated: only first ")
        assert notes.endswith("Clean statement on page 42.")
        assert financial_agent.extract.call_args.args[1] is True

    def test_unsupported_format(self, client: TestClient, financial_agent: MagicMock) -> None:
        response = client.post(
            "/api/extract-financial",
            files={"file": ("deck.pptx", b"x" * 500, "application/vnd.ms-powerpoint")},
        )

        assert response.status_code == 415
        body = response.json()
        assert body["success"] is False
        assert body["type"] == "UNSUPPORTED_FORMAT"
        financial_agent.extract.assert_not_called()

    def test_file_too_large(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch, clear_settings,
    ) -> None:
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "100")
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 413
        assert response.json()["type"] == "FILE_TOO_LARGE"

    def test_unreadable_document(self, client: TestClient) -> None:
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", b"tiny", "text/plain")},
        )

        assert response.status_code == 422
        assert response.json()["type"] == "PARSE_ERROR"

    def test_upstream_failure_mapped(self, client: TestClient, financial_agent: MagicMock) -> None:
        from research_portal.errors import RateLimited

        financial_agent.extract.side_effect = RateLimited("Rate limit reached.")
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "Rate limit reached.",
            "type": "RATE_LIMITED",
        }

    def test_unexpected_failure(self, client: TestClient, financial_agent: MagicMock) -> None:
        financial_agent.extract.side_effect = RuntimeError("boom")
        response = client.post(
            "/api/extract-financial",
            files={"file": ("acme.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["type"] == "UNKNOWN"
        assert body["details"] == "boom"

    def test_missing_file(self, client: TestClient) -> None:
        response = client.post("/api/extract-financial")
        assert response.status_code == 422


class TestAnalyzeEarnings:
    """POST /api/analyze-earnings"""

    def test_success_envelope(self, client: TestClient, earnings_agent: MagicMock) -> None:
        response = client.post(
            "/api/analyze-earnings",
            files={"file": ("acme_q4.txt", TRANSCRIPT, "text/plain")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["documentName"] == "acme_q4.txt"
        assert body["data"]["overallTone"]["overall"] == "optimistic"
        assert "supporting_quote" in body["data"]["keyPositives"][0]
        earnings_agent.analyze.assert_called_once()


class TestDownloadExcel:
    """POST /api/download-excel"""

    def test_returns_workbook(self, client: TestClient, financial_payload: dict) -> None:
        response = client.post("/api/download-excel", json=financial_payload)

        assert response.status_code == 200
        assert response.headers["content-type"] == (
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert response.headers["content-disposition"] == (
            'attachment; filename="Acme_Industrial_Corp__FinancialStatement.xlsx"'
        )
        assert response.headers["cache-control"] == "no-store"

        wb = load_workbook(io.BytesIO(response.content))
        assert wb.sheetnames == ["Income Statement", "Raw Data", "Extraction Report"]

    def test_invalid_payload(self, client: TestClient) -> None:
        response = client.post("/api/download-excel", json={"companyName": "Acme"})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "INVALID_INPUT"
        assert "lineItems" in body["details"]
        assert "periods" in body["details"]

    def test_nan_value_rejected(self, client: TestClient, financial_payload: dict) -> None:
        """A bare NaN token in the body is invalid input, not a blank cell."""
        financial_payload["lineItems"][0]["values"]["FY2022"] = float("nan")
        body = json.dumps(financial_payload)
        assert "NaN" in body

        response = client.post(
            "/api/download-excel",
            content=body.encode(),
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "INVALID_INPUT"
        assert "lineItems.0.values.FY2022" in response.json()["details"]

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post(
            "/api/download-excel",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "INVALID_INPUT"


class TestDownloadSummary:
    """POST /api/download-summary"""

    def test_returns_text(self, client: TestClient, earnings_payload: dict) -> None:
        payload = dict(earnings_payload, documentName="acme_q4.pdf")
        response = client.post("/api/download-summary", json=payload)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["content-disposition"] == (
            'attachment; filename="Acme_Industrial_Corp__EarningsAnalysis.txt"'
        )
        assert "KEY POSITIVES" in response.text
        assert "Source: acme_q4.pdf" in response.text

    def test_invalid_payload(self, client: TestClient) -> None:
        response = client.post("/api/download-summary", json={"companyName": "Acme"})

        assert response.status_code == 400
        assert "overallTone" in response.json()["details"]

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/download-summary", json=[1, 2])
        assert response.status_code == 400
