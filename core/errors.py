"""
LLM Errors

Typed failures raised by the LLM client. Every error carries a stable
`code` so callers can map them to responses (e.g. rate limiting -> 429)
without parsing messages.
"""
from typing import Optional


class LLMError(RuntimeError):
    """Base class for completion backend failures."""

    code = "llm_error"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class LLMRateLimitError(LLMError):
    """Quota exhausted or too many requests (HTTP 429)."""

    code = "rate_limited"


class LLMTimeoutError(LLMError):
    code = "timeout"


class LLMServiceError(LLMError):
    """Backend unreachable or returned a non-2xx status."""

    code = "backend_unavailable"


class LLMResponseError(LLMError):
    """Backend answered but the completion is missing or empty."""

    code = "malformed_response"


class LLMConfigurationError(LLMError):
    code = "not_configured"
