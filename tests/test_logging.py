"""
Tests for request context propagation and LLM call logging helpers.
"""

import json
import logging

import logs
from logs.logging_config import (
    ContextFilter,
    RequestContext,
    UserContext,
    get_request_id,
    get_user_id,
    get_llm_logger,
    log_context_usage,
    log_llm_response,
    log_metrics,
    get_metrics_logger,
)


class TestContext:

    def test_request_context_sets_and_restores(self):
        assert get_request_id() is None
        with RequestContext("req-1") as request_id:
            assert request_id == "req-1"
            assert get_request_id() == "req-1"
        assert get_request_id() is None

    def test_request_context_generates_id(self):
        with RequestContext() as request_id:
            assert request_id
            assert get_request_id() == request_id

    def test_filter_injects_ids(self):
        record = logging.LogRecord("llm", logging.INFO, __file__, 1, "msg", None, None)
        with RequestContext("req-2"), UserContext("user-9"):
            ContextFilter().filter(record)
        assert record.request_id == "req-2"
        assert record.user_id == "user-9"
        assert get_user_id() is None


class TestLLMCallLogging:

    def test_context_usage_stats(self):
        stats = log_context_usage("call-1", "gemma3:4b", "palavra " * 100, 8192)
        assert stats["context_limit"] == 8192
        assert stats["estimated_tokens"] > 0
        assert 0 < stats["usage_percent"] < 80
        assert stats["call_id"] == "call-1"
        assert stats["level"] == "ok"

    def test_context_usage_error_level_near_limit(self):
        stats = log_context_usage("call-3", "tiny", "x" * 4000, 100)
        assert stats["usage_percent"] >= 95
        assert stats["level"] == "error"

    def test_response_record_keyed_by_call_id(self, caplog):
        logger = get_llm_logger()
        logger.propagate = True
        try:
            with caplog.at_level(logging.DEBUG, logger="llm"), RequestContext("req-4"):
                log_llm_response(
                    call_id="call-4", model="m", backend="ollama",
                    response="ok", latency_ms=3.0, status="success",
                )
        finally:
            logger.propagate = False

        message = caplog.records[-1].getMessage()
        payload = json.loads(message[len("[LLM_RESPONSE] "):])
        assert payload["call_id"] == "call-4"
        assert payload["request_id"] == "req-4"

    def test_metrics_written_as_json(self, caplog):
        logger = get_metrics_logger()
        logger.propagate = True
        try:
            with caplog.at_level(logging.INFO, logger="llm.metrics"), RequestContext("req-3"):
                log_metrics(
                    call_id="call-2", model="m", backend="ollama", task="summarize",
                    latency_ms=12.5, prompt_chars=10, response_chars=5, status="success",
                )
        finally:
            logger.propagate = False

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["request_id"] == "req-3"
        assert payload["call_id"] == "call-2"
        assert payload["latency_ms"] == 12.5


class TestPackageExports:

    def test_exports_resolve(self):
        for name in logs.__all__:
            assert hasattr(logs, name)

    def test_only_request_and_user_context_tracked(self):
        assert "RequestContext" in logs.__all__
        assert "UserContext" in logs.__all__
        assert not hasattr(logs, "SessionContext")
        assert not hasattr(logs, "set_session_id")
