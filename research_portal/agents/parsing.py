"""Helpers for turning raw LLM replies into JSON payloads."""

from __future__ import annotations

import json
import re

from research_portal.errors import MalformedResponse

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


def extract_json(text: str) -> str:
    """Extract JSON from an LLM response, handling markdown code blocks."""
    text = text.strip()
    if text.startswith("```"):
        return _FENCE.sub("", text).strip()
    if "```json" in text:
        start = text.index("```json") + 7
        end = text.find("```", start)
        return text[start:end if end >= 0 else None].strip()

    brace_start = text.find("{")
    brace_end = text.rfind("}")
    if brace_start >= 0 and brace_end > brace_start:
        return text[brace_start:brace_end + 1]

    return text


def load_json_object(text: str, what: str) -> dict:
    """Parse the reply as a JSON object or raise MalformedResponse."""
    if not text.strip():
        raise MalformedResponse(f"Empty response from the model while parsing {what}")
    try:
        data = json.loads(extract_json(text))
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Failed to parse {what}: {exc.msg}", raw=text) from exc
    if not isinstance(data, dict):
        raise MalformedResponse(f"Failed to parse {what}: expected a JSON object", raw=text)
    return data
