"""Error taxonomy for the Research Portal.

Every failure surfaced to a caller carries a human-readable message and a
machine-readable ``error_type`` tag. Nothing here is retried.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all user-facing failures."""

    error_type = "UNKNOWN"
    status_code = 500

    def __init__(self, message: str, details: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Error envelope returned by the API."""
        payload = {
            "success": False,
            "error": self.message,
            "type": self.error_type,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(PortalError):
    """A record handed to a renderer is missing fields or has bad values."""

    error_type = "INVALID_INPUT"
    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        self.fields = fields or []
        super().__init__(message, details=", ".join(self.fields))


# ---------------------------------------------------------------------------
# Document intake
# ---------------------------------------------------------------------------

class FileTooLargeError(PortalError):
    error_type = "FILE_TOO_LARGE"
    status_code = 413


class UnsupportedFormatError(PortalError):
    error_type = "UNSUPPORTED_FORMAT"
    status_code = 415


class DocumentParseError(PortalError):
    """The document could not be read (corrupt, encrypted, image-only)."""

    error_type = "PARSE_ERROR"
    status_code = 422


class InsufficientTextError(DocumentParseError):
    """Parsing worked but yielded too little text to analyze."""


# ---------------------------------------------------------------------------
# Upstream LLM
# ---------------------------------------------------------------------------

class ExtractionError(PortalError):
    """Upstream LLM failure that fits no narrower category."""

    error_type = "API_ERROR"
    status_code = 502


class UpstreamError(ExtractionError):
    pass


class AuthenticationFailed(ExtractionError):
    """API key absent or rejected."""

    error_type = "AUTH_ERROR"


class RateLimited(ExtractionError):
    error_type = "RATE_LIMITED"


class MalformedResponse(ExtractionError):
    """The model replied with something that is not the expected JSON shape."""

    error_type = "MALFORMED_RESPONSE"

    # Raw replies are clipped so a runaway response cannot flood the logs
    RAW_PREVIEW_CHARS = 300

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw_preview = raw[: self.RAW_PREVIEW_CHARS]
        super().__init__(message, details=self.raw_preview)
