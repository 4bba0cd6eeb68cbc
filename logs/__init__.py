"""
Logs Module

Provides:
- Logging configuration for LLM calls
- Request/Response logging with metrics
- Context tracking (request_id, user_id)
"""

from .logging_config import (
    setup_llm_logging,
    get_llm_logger,
    get_metrics_logger,
    log_llm_request,
    log_llm_response,
    log_metrics,
    log_context_usage,
    RequestContext,
    UserContext,
    get_request_id,
    get_user_id,
    generate_request_id,
)

__all__ = [
    "setup_llm_logging",
    "get_llm_logger",
    "get_metrics_logger",
    "log_llm_request",
    "log_llm_response",
    "log_metrics",
    "log_context_usage",
    "RequestContext",
    "UserContext",
    "get_request_id",
    "get_user_id",
    "generate_request_id",
]
