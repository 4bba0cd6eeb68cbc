"""
Summarization Configuration

Module-specific settings for document summarization.
"""
import os

from config import (
    LLM_BACKEND,
    OLLAMA_URL,
    VLLM_URL,
    OPENAI_URL,
    OPENAI_API_KEY,
    DEFAULT_MODEL,
    LLM_TEMPERATURE,
)

# =========================
# LLM Backend Configuration
# =========================

# Backend type: ollama | vllm | openai (falls back to global config)
SUMMARIZATION_LLM_BACKEND = os.getenv("SUMMARIZATION_LLM_BACKEND", LLM_BACKEND)

SUMMARIZATION_OLLAMA_URL = os.getenv("SUMMARIZATION_OLLAMA_URL", OLLAMA_URL)
SUMMARIZATION_VLLM_URL = os.getenv("SUMMARIZATION_VLLM_URL", VLLM_URL)
SUMMARIZATION_OPENAI_URL = os.getenv("SUMMARIZATION_OPENAI_URL", OPENAI_URL)
SUMMARIZATION_OPENAI_API_KEY = os.getenv("SUMMARIZATION_OPENAI_API_KEY", OPENAI_API_KEY)

# =========================
# Model Settings
# =========================

SUMMARIZATION_DEFAULT_MODEL = os.getenv("SUMMARIZATION_DEFAULT_MODEL", DEFAULT_MODEL)

# Per-chunk summaries use a cheaper model than the final combination
SUMMARIZATION_CHUNK_MODEL = os.getenv("SUMMARIZATION_CHUNK_MODEL", SUMMARIZATION_DEFAULT_MODEL)
SUMMARIZATION_AGGREGATE_MODEL = os.getenv("SUMMARIZATION_AGGREGATE_MODEL", "gpt-4.1")

# =========================
# Mode Settings
# =========================

SUMMARIZATION_DEFAULT_MODE = "detailed"

# =========================
# Chunking Settings
# =========================

# Target chunk size in characters
SUMMARIZATION_CHUNK_SIZE = int(os.getenv("SUMMARIZATION_CHUNK_SIZE", "6000"))

# Chunk summaries in flight at once; 1 keeps the pipeline strictly sequential
SUMMARIZATION_MAX_CONCURRENT = int(os.getenv("SUMMARIZATION_MAX_CONCURRENT", "1"))

# =========================
# Input Limits
# =========================

SUMMARIZATION_MIN_TEXT_CHARS = int(os.getenv("SUMMARIZATION_MIN_TEXT_CHARS", "20"))

# =========================
# LLM Settings for Summarization
# =========================

SUMMARIZATION_TEMPERATURE = float(os.getenv("SUMMARIZATION_TEMPERATURE", str(LLM_TEMPERATURE)))
SUMMARIZATION_MAX_TOKENS = int(os.getenv("SUMMARIZATION_MAX_TOKENS", "2048"))

# =========================
# Connection Settings
# =========================

SUMMARIZATION_CONNECTION_TIMEOUT = int(os.getenv("SUMMARIZATION_CONNECTION_TIMEOUT", "300"))
SUMMARIZATION_CONNECTION_POOL_LIMIT = int(os.getenv("SUMMARIZATION_CONNECTION_POOL_LIMIT", "50"))
