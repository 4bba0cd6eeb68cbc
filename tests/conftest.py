"""
Shared fixtures for the summarizer tests.

Environment is pinned before any project module is imported so module
level configuration (chunk size, log handlers, backend) is predictable.
"""

import os
import sys
from pathlib import Path

os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SUMMARIZATION_CHUNK_SIZE"] = "6000"
os.environ["SUMMARIZATION_MAX_CONCURRENT"] = "1"

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from summarization.config import SUMMARIZATION_CHUNK_MODEL, SUMMARIZATION_AGGREGATE_MODEL


class FakeBackend:
    """
    Recording CompletionBackend.

    Returns "summary <n>" for the n-th call (1-based) unless `responder`
    is given. Raises `error` on call number `fail_on`.
    """

    def __init__(self, responder=None, fail_on=None, error=None):
        self.calls = []
        self.responder = responder
        self.fail_on = fail_on
        self.error = error

    async def complete(self, prompt, model=None):
        self.calls.append((prompt, model))
        call_number = len(self.calls)
        if self.fail_on == call_number:
            raise self.error
        if self.responder is not None:
            return await self.responder(prompt)
        return f"summary {call_number}"

    @property
    def prompts(self):
        return [prompt for prompt, _ in self.calls]

    @property
    def models(self):
        return [model for _, model in self.calls]


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def chunk_model():
    return SUMMARIZATION_CHUNK_MODEL


@pytest.fixture
def aggregate_model():
    return SUMMARIZATION_AGGREGATE_MODEL
