"""
Paragraph-aware chunking for long documents.

Paragraphs (separated by two or more newlines) are packed greedily into
chunks of at most `target_size` characters. A paragraph that is longer
than `target_size` on its own is cut into fixed-size slices.
"""
import re
from typing import List

from logs.logging_config import get_llm_logger
from .config import SUMMARIZATION_CHUNK_SIZE

logger = get_llm_logger()

PARAGRAPH_SPLIT_RE = re.compile(r"\n{2,}")
PARAGRAPH_SEPARATOR = "\n\n"


def _hard_split(paragraph: str, target_size: int) -> List[str]:
    return [
        paragraph[i:i + target_size]
        for i in range(0, len(paragraph), target_size)
    ]


def chunk_text(text: str, target_size: int = SUMMARIZATION_CHUNK_SIZE) -> List[str]:
    """
    Split text into ordered chunks of at most target_size characters.

    Args:
        text: Full document text
        target_size: Maximum characters per chunk

    Returns:
        Chunks in source order. Empty input gives an empty list.

    Raises:
        ValueError: If target_size is not positive
    """
    if target_size <= 0:
        raise ValueError(f"target_size must be positive, got {target_size}")

    chunks: List[str] = []
    current = ""
    hard_splits = 0

    for paragraph in PARAGRAPH_SPLIT_RE.split(text):
        candidate = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph

        if len(candidate) <= target_size:
            current = candidate
            continue

        if current:
            chunks.append(current)

        if len(paragraph) > target_size:
            slices = _hard_split(paragraph, target_size)
            chunks.extend(slices)
            hard_splits += len(slices)
            current = ""
        else:
            current = paragraph

    if current:
        chunks.append(current)

    logger.debug(
        f"[CHUNKING] chars={len(text)} | target_size={target_size} | "
        f"chunks={len(chunks)} | hard_splits={hard_splits}"
    )
    return chunks
