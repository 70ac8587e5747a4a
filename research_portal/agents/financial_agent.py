"""Financial Extraction Agent.

Sends document text to Claude with a fixed instruction template and parses
the JSON reply into a FinancialExtractionResult.
"""

from __future__ import annotations

import anthropic
from pydantic import ValidationError

from research_portal.agents.base import ClaudeAgent
from research_portal.agents.parsing import load_json_object
from research_portal.agents.prompts.financial_extraction import (
    FINANCIAL_EXTRACTION_PROMPT,
    FINANCIAL_SYSTEM_PROMPT,
    TRUNCATION_NOTICE,
)
from research_portal.agents.schemas.financial import FinancialExtractionResult
from research_portal.config.logging_config import get_logger
from research_portal.config.settings import get_settings
from research_portal.errors import MalformedResponse

logger = get_logger("agent.financial")


class FinancialExtractionAgent(ClaudeAgent):
    """Agent for income statement extraction."""

    name = "extraction"
    system_prompt = FINANCIAL_SYSTEM_PROMPT

    def __init__(self, client: anthropic.Anthropic | None = None) -> None:
        super().__init__(client, temperature=get_settings().financial_temperature)

    def extract(self, text: str, truncated: bool = False) -> FinancialExtractionResult:
        """Extract income statement line items from document text.

        Args:
            text: Cleaned document text.
            truncated: Whether the text was cut to fit the budget.

        Returns:
            FinancialExtractionResult Pydantic model.

        Raises:
            AuthenticationFailed, RateLimited, UpstreamError, MalformedResponse.
        """
        prompt = FINANCIAL_EXTRACTION_PROMPT.format(
            truncation_notice=TRUNCATION_NOTICE if truncated else "",
            document_text=text,
        )
        response_text = self._call_llm(prompt)
        return self._parse_response(response_text)

    def _parse_response(self, response_text: str) -> FinancialExtractionResult:
        """Parse LLM response into structured output."""
        data = load_json_object(response_text, "financial extraction result")
        try:
            result = FinancialExtractionResult.model_validate(data)
        except ValidationError as exc:
            logger.warning("schema_validation_failed", agent=self.name, errors=exc.error_count())
            raise MalformedResponse(
                "Failed to parse financial extraction result: "
                f"{exc.error_count()} field error(s)",
                raw=response_text,
            ) from exc

        logger.info(
            "financials_extracted",
            company=result.company_name,
            periods=len(result.periods),
            line_items=len(result.line_items),
        )
        return result
