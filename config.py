"""
Global Configuration

Shared settings used across all modules.
Module-specific settings are in each module's config.py file.

All settings can be overridden via environment variables or a .env file.
See .env.example for a complete list of configurable variables.
"""
import os
from dotenv import load_dotenv

# Load .env file before any os.getenv() calls
load_dotenv()
from functools import lru_cache

import tiktoken

# For airgapped systems, set TIKTOKEN_CACHE_DIR to a directory containing pre-cached encoding files.
try:
    _encoder = tiktoken.get_encoding("cl100k_base")
except Exception:
    _encoder = None

# =========================
# LLM Backend Configuration
# =========================

LLM_BACKEND = os.getenv("LLM_BACKEND", "openai")  # ollama | vllm | openai
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")
VLLM_URL = os.getenv("VLLM_URL", "http://localhost:8000")
OPENAI_URL = os.getenv("OPENAI_URL", "https://api.openai.com")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "gpt-4.1-mini")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.3"))

# =========================
# Model Context Lengths
# =========================

MODEL_CONTEXT_LENGTHS = {
    "gpt-4.1": 1047576,
    "gpt-4.1-mini": 1047576,
    "gemma3:4b": 8192,
    "gemma3:12b": 8192,
}

DEFAULT_CONTEXT_LENGTH = 8192  # Fallback for unknown models

# Context usage warning thresholds (percentage)
CONTEXT_WARNING_THRESHOLD = 80
CONTEXT_ERROR_THRESHOLD = 95

# =========================
# Server
# =========================

PORT = int(os.getenv("PORT", "3000"))


# =========================
# Utility Functions
# =========================

@lru_cache(maxsize=32)
def get_model_context_length(model: str) -> int:
    """Get context length for a model (cached)."""
    return MODEL_CONTEXT_LENGTHS.get(model, DEFAULT_CONTEXT_LENGTH)


def estimate_tokens(text: str) -> int:
    """
    Estimate token count with tiktoken.

    When the encoding files could not be loaded (no network, no cache)
    the count falls back to ~4 chars per token.
    """
    if _encoder is not None:
        return len(_encoder.encode(text))
    return len(text) // 4
