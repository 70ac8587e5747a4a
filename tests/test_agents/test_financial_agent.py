"""Tests for Financial Extraction Agent with mocked LLM responses."""

import json
from unittest.mock import MagicMock

import anthropic
import httpx
import pytest


def _make_mock_client(response_text: str) -> MagicMock:
    """Create a mock Anthropic client that returns a specific response."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.content = [MagicMock(text=response_text)]
    mock_response.stop_reason = "end_turn"
    mock_client.messages.create.return_value = mock_response
    return mock_client


def _failing_client(exc: Exception) -> MagicMock:
    mock_client = MagicMock()
    mock_client.messages.create.side_effect = exc
    return mock_client


def _status_error(cls: type, status: int) -> Exception:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status, request=request)
    return cls(message=f"HTTP {status}", response=response, body=None)


class TestFinancialExtractionAgent:
    """Test financial extraction with mocked LLM."""

    def test_extract_returns_structured_output(self, financial_payload: dict) -> None:
        """Agent should return a validated FinancialExtractionResult."""
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.agents.schemas.financial import FinancialExtractionResult

        agent = FinancialExtractionAgent(client=_make_mock_client(json.dumps(financial_payload)))
        result = agent.extract("Acme Industrial income statement ...")

        assert isinstance(result, FinancialExtractionResult)
        assert result.company_name == "Acme Industrial Corp."
        assert result.line_items[1].standard_label == "Cost of Revenue"

    def test_prompt_contains_document_text(self, financial_payload: dict) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent

        mock_client = _make_mock_client(json.dumps(financial_payload))
        agent = FinancialExtractionAgent(client=mock_client)
        agent.extract("Revenue {FY2023} was 1,250")

        kwargs = mock_client.messages.create.call_args.kwargs
        prompt = kwargs["messages"][0]["content"]
        assert "Revenue {FY2023} was 1,250" in prompt
        assert "---DOCUMENT START---" in prompt
        assert not prompt.startswith("NOTE:")
        assert kwargs["temperature"] == pytest.approx(0.1)

    def test_truncation_notice_added(self, financial_payload: dict) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent

        mock_client = _make_mock_client(json.dumps(financial_payload))
        FinancialExtractionAgent(client=mock_client).extract("text", truncated=True)

        prompt = mock_client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert prompt.startswith("NOTE: This document was truncated")

    def test_code_fenced_reply_parsed(self, financial_payload: dict) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent

        reply = "```json\n" + json.dumps(financial_payload) + "\n```"
        result = FinancialExtractionAgent(client=_make_mock_client(reply)).extract("text")

        assert result.periods == ["FY2023", "FY2022"]

    def test_invalid_json_raises_malformed(self) -> None:
        """Unparseable replies surface as a typed failure with a clipped preview."""
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import MalformedResponse

        reply = "I could not find an income statement. " + "x" * 1000
        agent = FinancialExtractionAgent(client=_make_mock_client(reply))

        with pytest.raises(MalformedResponse) as exc_info:
            agent.extract("text")

        assert exc_info.value.error_type == "MALFORMED_RESPONSE"
        assert len(exc_info.value.raw_preview) == 300

    def test_schema_mismatch_raises_malformed(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import MalformedResponse

        reply = json.dumps({"companyName": "Acme", "lineItems": "none"})
        with pytest.raises(MalformedResponse):
            FinancialExtractionAgent(client=_make_mock_client(reply)).extract("text")

    def test_nan_value_raises_malformed(self, financial_payload: dict) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import MalformedResponse

        financial_payload["lineItems"][0]["values"]["FY2023"] = float("nan")
        reply = json.dumps(financial_payload)

        with pytest.raises(MalformedResponse):
            FinancialExtractionAgent(client=_make_mock_client(reply)).extract("text")

    def test_empty_reply_raises_malformed(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import MalformedResponse

        with pytest.raises(MalformedResponse):
            FinancialExtractionAgent(client=_make_mock_client("")).extract("text")


class TestUpstreamErrorClassification:
    """Upstream failures map to typed variants at the SDK boundary."""

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch, clear_settings) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import AuthenticationFailed

        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        agent = FinancialExtractionAgent()
        with pytest.raises(AuthenticationFailed) as exc_info:
            agent.extract("text")

        assert exc_info.value.error_type == "AUTH_ERROR"

    def test_authentication_error(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import AuthenticationFailed

        client = _failing_client(_status_error(anthropic.AuthenticationError, 401))
        with pytest.raises(AuthenticationFailed):
            FinancialExtractionAgent(client=client).extract("text")

    def test_rate_limit_error(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import RateLimited

        client = _failing_client(_status_error(anthropic.RateLimitError, 429))
        with pytest.raises(RateLimited) as exc_info:
            FinancialExtractionAgent(client=client).extract("text")

        assert exc_info.value.error_type == "RATE_LIMITED"

    def test_other_api_error(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import UpstreamError

        client = _failing_client(_status_error(anthropic.InternalServerError, 500))
        with pytest.raises(UpstreamError) as exc_info:
            FinancialExtractionAgent(client=client).extract("text")

        assert exc_info.value.error_type == "API_ERROR"

    def test_connection_error(self) -> None:
        from research_portal.agents.financial_agent import FinancialExtractionAgent
        from research_portal.errors import UpstreamError

        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client = _failing_client(anthropic.APIConnectionError(request=request))
        with pytest.raises(UpstreamError):
            FinancialExtractionAgent(client=client).extract("text")
