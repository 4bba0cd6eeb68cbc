"""
Summarization LLM Client

Module-specific LLM client for the summarization service.
Uses BaseLLMClient with summarization-specific configuration.
"""

from core import BaseLLMClient, LLMConfig
from .config import (
    SUMMARIZATION_LLM_BACKEND,
    SUMMARIZATION_OLLAMA_URL,
    SUMMARIZATION_VLLM_URL,
    SUMMARIZATION_OPENAI_URL,
    SUMMARIZATION_OPENAI_API_KEY,
    SUMMARIZATION_DEFAULT_MODEL,
    SUMMARIZATION_TEMPERATURE,
    SUMMARIZATION_MAX_TOKENS,
    SUMMARIZATION_CONNECTION_TIMEOUT,
    SUMMARIZATION_CONNECTION_POOL_LIMIT,
)

# Create module-specific configuration
_config = LLMConfig(
    backend=SUMMARIZATION_LLM_BACKEND,
    ollama_url=SUMMARIZATION_OLLAMA_URL,
    vllm_url=SUMMARIZATION_VLLM_URL,
    openai_url=SUMMARIZATION_OPENAI_URL,
    openai_api_key=SUMMARIZATION_OPENAI_API_KEY,
    model=SUMMARIZATION_DEFAULT_MODEL,
    temperature=SUMMARIZATION_TEMPERATURE,
    max_tokens=SUMMARIZATION_MAX_TOKENS,
    timeout=SUMMARIZATION_CONNECTION_TIMEOUT,
    pool_limit=SUMMARIZATION_CONNECTION_POOL_LIMIT,
    task_name="summarize"
)

# Create module-specific client instance
_client = BaseLLMClient(_config)


def get_client() -> BaseLLMClient:
    """The shared summarization client (default completion backend of the pipeline)."""
    return _client


def is_configured() -> bool:
    """False when the OpenAI backend is selected without an API key."""
    return _config.backend != "openai" or bool(_config.openai_api_key)


async def close_session():
    """Close the summarization session. Call this on application shutdown."""
    await _client.close()


def get_backend_info() -> dict:
    """Get information about the summarization LLM backend configuration."""
    return _client.get_backend_info()
