"""
Core Module

Shared infrastructure components for all modules:
- LLM client base class and the CompletionBackend protocol
- Typed LLM errors
- Validators
"""

from .llm_client_base import BaseLLMClient, LLMConfig, CompletionBackend
from .errors import (
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMServiceError,
    LLMResponseError,
    LLMConfigurationError,
)
from .validators import (
    validate_min_text_length,
    validate_file_size,
)

__all__ = [
    "BaseLLMClient",
    "LLMConfig",
    "CompletionBackend",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMServiceError",
    "LLMResponseError",
    "LLMConfigurationError",
    "validate_min_text_length",
    "validate_file_size",
]
