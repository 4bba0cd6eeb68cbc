"""
Summarization Module

Summarizes long documents with a map-reduce approach:
- Splits text into paragraph-aware chunks of bounded size
- Summarizes each chunk in order, with its position in the document
- Combines chunk summaries into the final summary

Supports two modes:
- short: a single 5–8 sentence summary
- detailed: bullet topics, key points and next steps
"""

from .service import router
from .chunker import chunk_text
from .summarizer import (
    summarize_chunk,
    aggregate_summaries,
    summarize_document,
    summarize_long_text,
    summarize_long_text_sync,
)
from .schemas import (
    SummaryMode,
    SummarizationResponse,
    TextSummarizationRequest,
)

__all__ = [
    # Router
    "router",
    # Pipeline
    "chunk_text",
    "summarize_chunk",
    "aggregate_summaries",
    "summarize_document",
    "summarize_long_text",
    "summarize_long_text_sync",
    # Schemas
    "SummaryMode",
    "SummarizationResponse",
    "TextSummarizationRequest",
]
