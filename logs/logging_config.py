"""
Logging setup for LLM calls.

Provides:
- A named "llm" logger with console + rotating file handlers
- A separate "llm.metrics" logger writing one JSON object per line
- Request/user context propagated through contextvars so every record
  carries request_id and user_id
- Helpers that log a request, its context usage, its response and metrics
"""
import json
import uuid
import logging
from contextvars import ContextVar
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any

from config import (
    estimate_tokens,
    CONTEXT_WARNING_THRESHOLD,
    CONTEXT_ERROR_THRESHOLD,
)
from .config import (
    LOG_OUTPUT_DIR,
    LOG_TO_FILE,
    LOG_LEVEL,
    LOG_MAX_BYTES,
    LOG_BACKUP_COUNT,
    LOG_PREVIEW_LENGTH,
    LOG_DATE_FORMAT,
    LOG_DETAILED_FORMAT,
    LOG_SIMPLE_FORMAT,
    LOG_JSON_FORMAT,
    LOG_FILE_REQUESTS,
    LOG_FILE_ERRORS,
    LOG_FILE_METRICS,
)

LOG_DIR = Path(LOG_OUTPUT_DIR)

LLM_LOGGER_NAME = "llm"
METRICS_LOGGER_NAME = "llm.metrics"

_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

_configured = False


# =========================
# Context helpers
# =========================

def generate_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def get_user_id() -> Optional[str]:
    return _user_id_var.get()


class _ContextBinding:
    """Sets a context variable for the duration of a with-block."""

    _var: ContextVar = None

    def __init__(self, value: Optional[str]):
        self.value = value
        self._token = None

    def __enter__(self):
        self._token = self._var.set(self.value)
        return self.value

    def __exit__(self, exc_type, exc, tb):
        self._var.reset(self._token)
        return False


class RequestContext(_ContextBinding):
    """
    Bind a request_id to all log records emitted inside the block.

    Example:
        with RequestContext(request_id):
            logger.info("[SUMMARIZE_FILE] START")
    """
    _var = _request_id_var

    def __init__(self, request_id: Optional[str] = None):
        super().__init__(request_id or generate_request_id())


class UserContext(_ContextBinding):
    _var = _user_id_var


class ContextFilter(logging.Filter):
    """Inject request_id/user_id into every record so formatters can use them."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_var.get() or "-"
        record.user_id = _user_id_var.get() or "-"
        return True


# =========================
# Structured log records
# =========================

@dataclass
class LLMRequestLog:
    call_id: str
    request_id: Optional[str]
    model: str
    backend: str
    task: str
    prompt_chars: int
    prompt_preview: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


@dataclass
class LLMResponseLog:
    call_id: str
    request_id: Optional[str]
    model: str
    backend: str
    status: str
    latency_ms: float
    response_chars: int
    response_preview: str
    error_message: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


@dataclass
class LLMMetrics:
    call_id: str
    request_id: Optional[str]
    user_id: Optional[str]
    model: str
    backend: str
    task: str
    latency_ms: float
    prompt_chars: int
    response_chars: int
    status: str
    context_limit: Optional[int] = None
    estimated_tokens: Optional[int] = None
    context_usage_percent: Optional[float] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


@dataclass
class ContextUsageLog:
    call_id: str
    model: str
    estimated_tokens: int
    context_limit: int
    usage_percent: float
    level: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =========================
# Setup
# =========================

def _file_handler(filename: str, level: int, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        LOG_DIR / filename,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(ContextFilter())
    return handler


def setup_llm_logging(level: str = LOG_LEVEL, log_to_file: bool = LOG_TO_FILE) -> logging.Logger:
    """
    Configure the llm and llm.metrics loggers. Safe to call more than once.
    """
    global _configured

    llm_logger = logging.getLogger(LLM_LOGGER_NAME)
    if _configured:
        return llm_logger

    llm_logger.setLevel(level)
    llm_logger.propagate = False

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_SIMPLE_FORMAT, datefmt=LOG_DATE_FORMAT))
    console.addFilter(ContextFilter())
    llm_logger.addHandler(console)

    metrics_logger = logging.getLogger(METRICS_LOGGER_NAME)
    metrics_logger.setLevel(logging.INFO)
    metrics_logger.propagate = False

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        llm_logger.addHandler(_file_handler(LOG_FILE_REQUESTS, logging.DEBUG, LOG_DETAILED_FORMAT))
        llm_logger.addHandler(_file_handler(LOG_FILE_ERRORS, logging.ERROR, LOG_DETAILED_FORMAT))
        metrics_logger.addHandler(_file_handler(LOG_FILE_METRICS, logging.INFO, LOG_JSON_FORMAT))
    else:
        metrics_logger.addHandler(logging.NullHandler())

    _configured = True
    return llm_logger


def get_llm_logger() -> logging.Logger:
    """Get the configured llm logger."""
    return setup_llm_logging()


def get_metrics_logger() -> logging.Logger:
    setup_llm_logging()
    return logging.getLogger(METRICS_LOGGER_NAME)


# =========================
# LLM call logging
# =========================

def _preview(text: str) -> str:
    if len(text) <= LOG_PREVIEW_LENGTH:
        return text
    return text[:LOG_PREVIEW_LENGTH] + "..."


def log_llm_request(
    model: str,
    backend: str,
    task: str,
    prompt: str,
    temperature: float = None,
    max_tokens: int = None
) -> str:
    """
    Log an outgoing LLM request.

    Returns:
        A call_id used to correlate the response and metrics records
    """
    call_id = generate_request_id()
    entry = LLMRequestLog(
        call_id=call_id,
        request_id=get_request_id(),
        model=model,
        backend=backend,
        task=task,
        prompt_chars=len(prompt),
        prompt_preview=_preview(prompt),
        temperature=temperature,
        max_tokens=max_tokens,
    )
    get_llm_logger().debug(f"[LLM_REQUEST] {entry.to_json()}")
    return call_id


def log_llm_response(
    call_id: str,
    model: str,
    backend: str,
    response: str,
    latency_ms: float,
    status: str,
    error_message: str = None
) -> None:
    entry = LLMResponseLog(
        call_id=call_id,
        request_id=get_request_id(),
        model=model,
        backend=backend,
        status=status,
        latency_ms=round(latency_ms, 2),
        response_chars=len(response),
        response_preview=_preview(response),
        error_message=error_message,
    )
    logger = get_llm_logger()
    if status == "success":
        logger.debug(f"[LLM_RESPONSE] {entry.to_json()}")
    else:
        logger.error(f"[LLM_RESPONSE] {entry.to_json()}")


def log_context_usage(
    call_id: str,
    model: str,
    prompt: str,
    context_limit: int
) -> Dict[str, Any]:
    """
    Estimate prompt tokens against the model context and warn when close to the limit.

    Returns:
        dict with call_id, model, estimated_tokens, context_limit,
        usage_percent and level (ok | warning | error)
    """
    estimated = estimate_tokens(prompt)
    usage_percent = round((estimated / context_limit) * 100, 2) if context_limit else 0.0

    if usage_percent >= CONTEXT_ERROR_THRESHOLD:
        level = "error"
    elif usage_percent >= CONTEXT_WARNING_THRESHOLD:
        level = "warning"
    else:
        level = "ok"

    entry = ContextUsageLog(
        call_id=call_id,
        model=model,
        estimated_tokens=estimated,
        context_limit=context_limit,
        usage_percent=usage_percent,
        level=level,
    )

    logger = get_llm_logger()
    message = (
        f"[CONTEXT] model={model} | tokens={estimated} | "
        f"limit={context_limit} | usage={usage_percent:.1f}%"
    )
    if level == "error":
        logger.error(message)
    elif level == "warning":
        logger.warning(message)
    else:
        logger.debug(message)

    return entry.to_dict()


def log_metrics(
    call_id: str,
    model: str,
    backend: str,
    task: str,
    latency_ms: float,
    prompt_chars: int,
    response_chars: int,
    status: str,
    context_limit: int = None,
    estimated_tokens: int = None,
    context_usage_percent: float = None
) -> None:
    metrics = LLMMetrics(
        call_id=call_id,
        request_id=get_request_id(),
        user_id=get_user_id(),
        model=model,
        backend=backend,
        task=task,
        latency_ms=round(latency_ms, 2),
        prompt_chars=prompt_chars,
        response_chars=response_chars,
        status=status,
        context_limit=context_limit,
        estimated_tokens=estimated_tokens,
        context_usage_percent=context_usage_percent,
    )
    get_metrics_logger().info(metrics.to_json())
