"""
Base LLM Client

Provides shared LLM client functionality for all modules.
Each module creates its own instance with its own configuration.

Features:
- Supports Ollama, VLLM and OpenAI-compatible chat completion backends
- Module-specific configuration (backend, URL, model, etc.)
- Connection pooling per instance
- Comprehensive logging
- Typed errors (rate limit, timeout, unavailable, malformed response)

Usage:
    # In module's llm_client.py
    from core.llm_client_base import BaseLLMClient, LLMConfig

    config = LLMConfig(
        backend="openai",
        openai_api_key="sk-...",
        model="gpt-4.1-mini",
        task_name="summarize"
    )

    client = BaseLLMClient(config)
    response = await client.complete(prompt)
"""

import time
import asyncio
import aiohttp
from dataclasses import dataclass
from typing import Optional, Dict, Any, Protocol

from config import get_model_context_length
from logs.logging_config import (
    get_llm_logger,
    log_llm_request,
    log_llm_response,
    log_metrics,
    log_context_usage,
)
from .errors import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMServiceError,
    LLMTimeoutError,
)

logger = get_llm_logger()

# Error codes some providers put in the body of quota failures
RATE_LIMIT_ERROR_CODES = ("insufficient_quota", "rate_limit_exceeded")


class CompletionBackend(Protocol):
    """Anything that turns a prompt into a completion string, or raises LLMError."""

    async def complete(self, prompt: str, model: Optional[str] = None) -> str:
        ...


@dataclass
class LLMConfig:
    """
    Configuration for an LLM client instance.

    Each module creates its own LLMConfig with module-specific settings.
    This allows different modules to use different backends, models, URLs, etc.
    """
    # Backend selection: "ollama", "vllm" or "openai"
    backend: str = "ollama"

    # Ollama settings
    ollama_url: str = "http://localhost:11434"

    # VLLM settings
    vllm_url: str = "http://localhost:8000"

    # OpenAI settings
    openai_url: str = "https://api.openai.com"
    openai_api_key: str = ""

    # Model settings
    model: str = "gemma3:4b"
    temperature: float = 0.3
    max_tokens: int = 2048

    # Connection settings
    timeout: int = 300
    pool_limit: int = 50

    # Logging identifier
    task_name: str = "unknown"

    def get_backend_url(self) -> str:
        """Get the URL for the configured backend."""
        if self.backend == "vllm":
            return self.vllm_url
        if self.backend == "openai":
            return self.openai_url
        return self.ollama_url

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (API key redacted)."""
        return {
            "backend": self.backend,
            "ollama_url": self.ollama_url,
            "vllm_url": self.vllm_url,
            "openai_url": self.openai_url,
            "openai_api_key_set": bool(self.openai_api_key),
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "pool_limit": self.pool_limit,
            "task_name": self.task_name,
        }


class BaseLLMClient:
    """
    Base LLM client with shared logic for all backends.

    Each module creates its OWN INSTANCE with its OWN CONFIGURATION.
    Implements CompletionBackend through complete().
    """

    def __init__(self, config: LLMConfig):
        """
        Initialize LLM client with module-specific configuration.

        Args:
            config: LLMConfig with backend, URL, model, and other settings
        """
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._tag = f"[{config.task_name.upper()}_LLM]"

        logger.debug(
            f"{self._tag} Initialized | "
            f"backend={config.backend} | model={config.model} | "
            f"url={config.get_backend_url()}"
        )

    async def get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session for this instance.

        Each BaseLLMClient instance maintains its own session,
        allowing different modules to have independent connection pools.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            connector = aiohttp.TCPConnector(
                limit=self.config.pool_limit,
                limit_per_host=self.config.pool_limit
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector
            )
            logger.debug(f"{self._tag} Session created | backend={self.config.backend}")
        return self._session

    async def close(self):
        """Close this instance's session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug(f"{self._tag} Session closed")

    async def complete(self, prompt: str, model: Optional[str] = None) -> str:
        """Single request/response completion; see generate_text_with_logging."""
        return await self.generate_text_with_logging(prompt=prompt, model=model)

    async def generate_text_with_logging(
        self,
        prompt: str,
        model: str = None,
        temperature: float = None,
        max_tokens: int = None,
        task: str = None,
    ) -> str:
        """
        Generate text using the configured backend with full logging.

        Args:
            prompt: The prompt to send to the LLM
            model: Override model (uses config.model if not specified)
            temperature: Override temperature (uses config.temperature if not specified)
            max_tokens: Override max_tokens (uses config.max_tokens if not specified)
            task: Override task name for logging (uses config.task_name if not specified)

        Returns:
            Generated text response, as returned by the backend

        Raises:
            LLMError subclass describing the failure
        """
        model_name = model or self.config.model
        temp = temperature if temperature is not None else self.config.temperature
        max_tok = max_tokens if max_tokens is not None else self.config.max_tokens
        task_name = task or self.config.task_name

        context_limit = get_model_context_length(model_name)

        call_id = log_llm_request(
            model=model_name,
            backend=self.config.backend,
            task=task_name,
            prompt=prompt,
            temperature=temp,
            max_tokens=max_tok
        )

        context_stats = log_context_usage(
            call_id=call_id,
            model=model_name,
            prompt=prompt,
            context_limit=context_limit
        )

        start_time = time.time()

        try:
            if self.config.backend in ("vllm", "openai"):
                response = await self._call_chat_completions(prompt, model_name, temp, max_tok)
            else:
                response = await self._call_ollama(prompt, model_name, temp, max_tok)

        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000

            log_llm_response(
                call_id=call_id,
                model=model_name,
                backend=self.config.backend,
                response="",
                latency_ms=latency_ms,
                status="error",
                error_message=str(e)
            )
            log_metrics(
                call_id=call_id,
                model=model_name,
                backend=self.config.backend,
                task=task_name,
                latency_ms=latency_ms,
                prompt_chars=len(prompt),
                response_chars=0,
                status="error",
                context_limit=context_stats["context_limit"],
                estimated_tokens=context_stats["estimated_tokens"],
                context_usage_percent=context_stats["usage_percent"]
            )
            raise

        latency_ms = (time.time() - start_time) * 1000

        log_llm_response(
            call_id=call_id,
            model=model_name,
            backend=self.config.backend,
            response=response,
            latency_ms=latency_ms,
            status="success"
        )
        log_metrics(
            call_id=call_id,
            model=model_name,
            backend=self.config.backend,
            task=task_name,
            latency_ms=latency_ms,
            prompt_chars=len(prompt),
            response_chars=len(response),
            status="success",
            context_limit=context_stats["context_limit"],
            estimated_tokens=context_stats["estimated_tokens"],
            context_usage_percent=context_stats["usage_percent"]
        )

        return response

    async def _call_ollama(
        self,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        """Call Ollama /api/generate (non-streaming)."""
        url = f"{self.config.ollama_url}/api/generate"

        payload = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens
            }
        }

        data = await self._post_json(url, payload, model)

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise LLMResponseError(f"{self.config.task_name.title()} LLM returned an empty response.")
        return text

    async def _call_chat_completions(
        self,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        """Call an OpenAI-compatible /v1/chat/completions endpoint (VLLM or OpenAI)."""
        headers = {}
        if self.config.backend == "openai":
            if not self.config.openai_api_key:
                raise LLMConfigurationError("OPENAI_API_KEY is not set.")
            headers["Authorization"] = f"Bearer {self.config.openai_api_key}"

        url = f"{self.config.get_backend_url()}/v1/chat/completions"

        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens
        }

        data = await self._post_json(url, payload, model, headers=headers)

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise LLMResponseError(f"{self.config.task_name.title()} LLM returned a malformed response.")

        if not isinstance(text, str) or not text.strip():
            raise LLMResponseError(f"{self.config.task_name.title()} LLM returned an empty response.")
        return text

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        model: str,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """POST a JSON payload and decode the JSON answer, mapping failures to LLMError."""
        logger.debug(f"{self._tag} Calling {self.config.backend} | url={url} | model={model}")

        try:
            session = await self.get_session()
            async with session.post(url, json=payload, headers=headers) as r:
                if r.status >= 400:
                    body = await r.text()
                    self._raise_for_status(r.status, body, model)
                try:
                    return await r.json(content_type=None)
                except ValueError:
                    raise LLMResponseError(
                        f"{self.config.task_name.title()} LLM returned invalid JSON.",
                        status=r.status
                    )

        except asyncio.TimeoutError:
            logger.error(f"{self._tag} {self.config.backend} timeout | model={model}")
            raise LLMTimeoutError(
                f"{self.config.task_name.title()} LLM request timed out. Please try again."
            )

        except aiohttp.ClientError as e:
            logger.error(
                f"{self._tag} {self.config.backend} request failed | "
                f"model={model} | error={e}"
            )
            raise LLMServiceError(
                f"{self.config.task_name.title()} LLM service unavailable. Please try again later."
            )

    def _raise_for_status(self, status: int, body: str, model: str) -> None:
        if status == 429 or any(code in body for code in RATE_LIMIT_ERROR_CODES):
            logger.warning(f"{self._tag} {self.config.backend} rate limited | model={model} | status={status}")
            raise LLMRateLimitError(
                f"{self.config.task_name.title()} LLM usage limit reached.",
                status=status
            )

        logger.error(
            f"{self._tag} {self.config.backend} HTTP error | "
            f"model={model} | status={status} | body={body[:200]}"
        )
        raise LLMServiceError(
            f"{self.config.task_name.title()} LLM service returned HTTP {status}.",
            status=status
        )

    def get_backend_info(self) -> Dict[str, Any]:
        """
        Get information about this client's backend configuration.

        Returns:
            Dictionary with backend configuration details
        """
        info = self.config.to_dict()
        info["active_url"] = self.config.get_backend_url()
        return info
