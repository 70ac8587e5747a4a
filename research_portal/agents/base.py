"""Shared Claude plumbing for the extraction agents.

Upstream failures are classified here, where the SDK's typed exceptions are
still available, instead of by matching on error text later.
"""

from __future__ import annotations

import anthropic

from research_portal.config.logging_config import get_logger
from research_portal.config.settings import get_settings
from research_portal.errors import AuthenticationFailed, RateLimited, UpstreamError

logger = get_logger("agent.base")


class ClaudeAgent:
    """Base class: owns the Anthropic client and the model parameters."""

    name = "base"
    system_prompt = ""

    def __init__(
        self,
        client: anthropic.Anthropic | None = None,
        temperature: float | None = None,
    ) -> None:
        settings = get_settings()
        if client is None and settings.anthropic_api_key:
            client = anthropic.Anthropic(api_key=settings.anthropic_api_key)
        self.client = client
        self.model = settings.llm_model
        self.max_tokens = settings.llm_max_tokens
        self.temperature = temperature if temperature is not None else 0.0

    def _call_llm(self, prompt: str) -> str:
        """Call Claude and return the reply text."""
        if self.client is None:
            raise AuthenticationFailed(
                "API key missing. Set ANTHROPIC_API_KEY in the environment or .env file.",
            )
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=self.system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            logger.warning("llm_auth_failed", agent=self.name)
            raise AuthenticationFailed(
                "API key missing or invalid. Check ANTHROPIC_API_KEY.",
                details=str(exc),
            ) from exc
        except anthropic.RateLimitError as exc:
            logger.warning("llm_rate_limited", agent=self.name)
            raise RateLimited(
                "Rate limit reached. Wait a minute and try again.",
                details=str(exc),
            ) from exc
        except anthropic.APIError as exc:
            logger.warning("llm_call_failed", agent=self.name, error=type(exc).__name__)
            raise UpstreamError(
                f"AI {self.name} failed. Please try again.",
                details=str(exc),
            ) from exc

        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning("llm_reply_truncated", agent=self.name, max_tokens=self.max_tokens)
        return "".join(getattr(block, "text", "") for block in response.content)
