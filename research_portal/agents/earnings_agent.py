"""Earnings Analysis Agent.

Analyzes an earnings call transcript or management commentary with Claude
and produces an EarningsAnalysisResult.
"""

from __future__ import annotations

import anthropic
from pydantic import ValidationError

from research_portal.agents.base import ClaudeAgent
from research_portal.agents.parsing import load_json_object
from research_portal.agents.prompts.earnings_analysis import (
    EARNINGS_ANALYSIS_PROMPT,
    EARNINGS_SYSTEM_PROMPT,
)
from research_portal.agents.prompts.financial_extraction import TRUNCATION_NOTICE
from research_portal.agents.schemas.earnings import EarningsAnalysisResult
from research_portal.config.logging_config import get_logger
from research_portal.config.settings import get_settings
from research_portal.errors import MalformedResponse

logger = get_logger("agent.earnings")


class EarningsAgent(ClaudeAgent):
    """Agent for earnings call tone, guidance and initiative analysis."""

    name = "analysis"
    system_prompt = EARNINGS_SYSTEM_PROMPT

    def __init__(self, client: anthropic.Anthropic | None = None) -> None:
        super().__init__(client, temperature=get_settings().earnings_temperature)

    def analyze(self, text: str, truncated: bool = False) -> EarningsAnalysisResult:
        """Run earnings analysis over document text.

        Args:
            text: Cleaned transcript text.
            truncated: Whether the text was cut to fit the budget.

        Returns:
            EarningsAnalysisResult Pydantic model.
        """
        prompt = EARNINGS_ANALYSIS_PROMPT.format(
            truncation_notice=TRUNCATION_NOTICE if truncated else "",
            document_text=text,
        )
        response_text = self._call_llm(prompt)
        return self._parse_response(response_text)

    def _parse_response(self, response_text: str) -> EarningsAnalysisResult:
        data = load_json_object(response_text, "earnings analysis result")
        try:
            result = EarningsAnalysisResult.model_validate(data)
        except ValidationError as exc:
            logger.warning("schema_validation_failed", agent=self.name, errors=exc.error_count())
            raise MalformedResponse(
                "Failed to parse earnings analysis result: "
                f"{exc.error_count()} field error(s)",
                raw=response_text,
            ) from exc

        logger.info(
            "earnings_analyzed",
            company=result.company_name,
            tone=result.overall_tone.overall,
            positives=len(result.key_positives),
            concerns=len(result.key_concerns),
        )
        return result
