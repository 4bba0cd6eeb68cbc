"""
Map-reduce summarization for long documents.

1. Split the text into paragraph-aware chunks (chunker.chunk_text)
2. Summarize each chunk with its position in the document (MAP phase)
3. Combine the partial summaries into one final summary (REDUCE phase),
   skipped when the document fits in a single chunk

Chunks are summarized one at a time by default. A bounded fan-out can be
enabled with max_concurrent > 1; partial summaries are always handed to
the aggregation step in chunk order.

Backend failures (core.errors.LLMError) are never caught here: the first
failure aborts the run and reaches the caller unchanged.
"""
import time
import asyncio
from typing import List, Dict, Optional, Union

from core import CompletionBackend
from logs.logging_config import get_llm_logger
from .config import (
    SUMMARIZATION_CHUNK_MODEL,
    SUMMARIZATION_AGGREGATE_MODEL,
    SUMMARIZATION_CHUNK_SIZE,
    SUMMARIZATION_MAX_CONCURRENT,
)
from .chunker import chunk_text
from .llm_client import get_client, close_session
from .prompts import get_chunk_prompt, get_aggregate_prompt
from .schemas import SummaryMode

logger = get_llm_logger()


def _resolve_backend(backend: Optional[CompletionBackend]) -> CompletionBackend:
    return get_client() if backend is None else backend


async def summarize_chunk(
    text: str,
    index: int,
    total: int,
    mode: SummaryMode,
    backend: Optional[CompletionBackend] = None
) -> str:
    """
    Summarize one chunk with a single backend call.

    Args:
        text: Chunk text
        index: 1-based chunk position
        total: Number of chunks in the document
        mode: Summary mode
        backend: Completion backend (module client if not given)

    Returns:
        The backend output, unmodified
    """
    prompt = get_chunk_prompt(text, index, total, mode)
    logger.info(f"[MAP] Chunk {index}/{total} | chars={len(text)} | mode={mode.value}")
    return await _resolve_backend(backend).complete(prompt, model=SUMMARIZATION_CHUNK_MODEL)


async def aggregate_summaries(
    partials: List[str],
    mode: SummaryMode,
    backend: Optional[CompletionBackend] = None
) -> str:
    """
    Combine ordered partial summaries into one summary with a single backend call.

    Raises:
        ValueError: If fewer than two partial summaries are given
    """
    if len(partials) < 2:
        raise ValueError(f"aggregation needs at least 2 partial summaries, got {len(partials)}")

    prompt = get_aggregate_prompt(partials, mode)
    logger.info(f"[REDUCE] Combining {len(partials)} partial summaries | mode={mode.value}")
    return await _resolve_backend(backend).complete(prompt, model=SUMMARIZATION_AGGREGATE_MODEL)


async def _summarize_chunks_sequential(
    chunks: List[str],
    mode: SummaryMode,
    backend: CompletionBackend
) -> List[str]:
    total = len(chunks)
    partials = []
    for index, chunk in enumerate(chunks, start=1):
        partials.append(await summarize_chunk(chunk, index, total, mode, backend))
    return partials


async def _summarize_chunks_parallel(
    chunks: List[str],
    mode: SummaryMode,
    backend: CompletionBackend,
    max_concurrent: int
) -> List[str]:
    """
    Summarize chunks with at most max_concurrent calls in flight.

    gather() keeps results in submission order, so partial i always belongs
    to chunk i regardless of completion order. The first failure cancels
    the remaining chunk tasks and is re-raised.
    """
    total = len(chunks)
    semaphore = asyncio.Semaphore(max_concurrent)

    async def summarize_bounded(index: int, chunk: str) -> str:
        async with semaphore:
            return await summarize_chunk(chunk, index, total, mode, backend)

    tasks = [
        asyncio.ensure_future(summarize_bounded(index, chunk))
        for index, chunk in enumerate(chunks, start=1)
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except Exception:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def summarize_document(
    full_text: str,
    mode: Union[SummaryMode, str, None] = None,
    backend: Optional[CompletionBackend] = None,
    target_size: Optional[int] = None,
    max_concurrent: Optional[int] = None
) -> Dict:
    """
    Run the full pipeline and return the summary with run metadata.

    Args:
        full_text: Extracted document text (validated by the caller)
        mode: short | detailed; unknown values fall back to detailed
        backend: Completion backend (module client if not given)
        target_size: Chunk size in characters (defaults to config)
        max_concurrent: Chunk summaries in flight (defaults to config, 1 = sequential)

    Returns:
        Dictionary with summary and metadata

    Raises:
        ValueError: If the text produces no chunks
        LLMError: Any backend failure, unchanged
    """
    start_time = time.time()
    mode = SummaryMode.parse(mode)
    backend = _resolve_backend(backend)
    target_size = target_size or SUMMARIZATION_CHUNK_SIZE
    max_concurrent = max_concurrent or SUMMARIZATION_MAX_CONCURRENT

    chunks = chunk_text(full_text, target_size)
    total_chunks = len(chunks)
    if not chunks:
        raise ValueError("No chunks generated from text")

    logger.info(
        f"[SUMMARIZE] START | chars={len(full_text)} | chunks={total_chunks} | "
        f"mode={mode.value} | max_concurrent={max_concurrent}"
    )

    map_start = time.time()
    if max_concurrent > 1 and total_chunks > 1:
        partials = await _summarize_chunks_parallel(chunks, mode, backend, max_concurrent)
    else:
        partials = await _summarize_chunks_sequential(chunks, mode, backend)
    logger.info(f"[SUMMARIZE] MAP_PHASE | elapsed={time.time() - map_start:.2f}s")

    if len(partials) == 1:
        summary = partials[0]
        method = "direct"
        model = SUMMARIZATION_CHUNK_MODEL
        backend_calls = 1
    else:
        reduce_start = time.time()
        summary = await aggregate_summaries(partials, mode, backend)
        logger.info(f"[SUMMARIZE] REDUCE_PHASE | elapsed={time.time() - reduce_start:.2f}s")
        method = "map_reduce"
        model = SUMMARIZATION_AGGREGATE_MODEL
        backend_calls = total_chunks + 1

    elapsed = time.time() - start_time
    logger.info(f"[SUMMARIZE] END | method={method} | calls={backend_calls} | elapsed={elapsed:.2f}s")

    return {
        "summary": summary,
        "method": method,
        "mode": mode,
        "total_chunks": total_chunks,
        "total_chars": len(full_text),
        "backend_calls": backend_calls,
        "model": model,
        "elapsed_seconds": round(elapsed, 3),
    }


async def summarize_long_text(
    full_text: str,
    mode: Union[SummaryMode, str, None] = None,
    backend: Optional[CompletionBackend] = None,
    target_size: Optional[int] = None,
    max_concurrent: Optional[int] = None
) -> str:
    """Summarize a long text and return only the final summary."""
    result = await summarize_document(
        full_text,
        mode=mode,
        backend=backend,
        target_size=target_size,
        max_concurrent=max_concurrent,
    )
    return result["summary"]


def summarize_long_text_sync(
    full_text: str,
    mode: Union[SummaryMode, str, None] = None,
    backend: Optional[CompletionBackend] = None,
    target_size: Optional[int] = None,
) -> str:
    """
    Synchronous wrapper for summarize_long_text.

    Use this when calling from synchronous code.
    """
    async def run() -> str:
        try:
            return await summarize_long_text(
                full_text,
                mode=mode,
                backend=backend,
                target_size=target_size,
            )
        finally:
            # the module session is bound to the loop asyncio.run closes
            if backend is None:
                await close_session()

    return asyncio.run(run())
