"""
Schemas for document summarization.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .config import SUMMARIZATION_DEFAULT_MODE


class SummaryMode(str, Enum):
    """Summary style, selects both the chunk and the aggregation prompt."""
    SHORT = "short"
    DETAILED = "detailed"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SummaryMode":
        """
        Case-insensitive lookup. Missing or unknown values fall back to DETAILED.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls(SUMMARIZATION_DEFAULT_MODE)
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls(SUMMARIZATION_DEFAULT_MODE)


class TextSummarizationRequest(BaseModel):
    """Summarize text that has already been extracted."""
    request_id: Optional[str] = Field(None, description="Request ID (generated if not provided)")
    text: str = Field(..., description="Text to summarize")
    mode: Optional[str] = Field(None, description="short | detailed (default: detailed)")
    chunk_size: Optional[int] = Field(None, gt=0, description="Chunk size in characters (defaults to config)")
    user_id: Optional[str] = Field(None, description="User identifier for logging")


class SummarizationResponse(BaseModel):
    """Response from the summarization pipeline."""
    request_id: str = Field(..., description="Unique request identifier")
    summary: str = Field(..., description="Generated summary")
    mode: SummaryMode = Field(..., description="Mode used")
    method: str = Field(..., description="Method used: direct or map_reduce")
    total_chunks: int = Field(..., description="Chunks summarized")
    total_chars: int = Field(..., description="Characters in the input text")
    model: str = Field(..., description="Model used for the final summary")
    user_id: Optional[str] = Field(None, description="User identifier if provided")
