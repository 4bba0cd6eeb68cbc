"""
FastAPI router for document summarization endpoints.

Pipeline Architecture:
1. File input → Extraction → Chunking → Chunk summaries → Aggregation
2. Text input → Chunking → Chunk summaries → Aggregation

Backend failures are mapped to HTTP errors here: rate limiting becomes a
429 so clients can tell quota exhaustion apart from other failures.
"""
import os
import uuid
import tempfile
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Query
from fastapi.concurrency import run_in_threadpool

from core import (
    CompletionBackend,
    LLMConfigurationError,
    LLMRateLimitError,
    validate_file_size,
    validate_min_text_length,
)
from logs import get_llm_logger, RequestContext, UserContext
from text_extractor import TextExtractor, normalize_extracted_text
from text_extractor.config import EXTRACTOR_SUPPORTED_FILE_TYPES, EXTRACTOR_MAX_FILE_SIZE_MB
from .config import (
    SUMMARIZATION_CHUNK_SIZE,
    SUMMARIZATION_MAX_CONCURRENT,
    SUMMARIZATION_MIN_TEXT_CHARS,
    SUMMARIZATION_CHUNK_MODEL,
    SUMMARIZATION_AGGREGATE_MODEL,
    SUMMARIZATION_DEFAULT_MODE,
)
from .llm_client import get_client, get_backend_info, is_configured
from .schemas import SummaryMode, SummarizationResponse, TextSummarizationRequest
from .summarizer import summarize_document

logger = get_llm_logger()

router = APIRouter(prefix="/api/v1/summarize", tags=["Summarization"])

RATE_LIMIT_MESSAGE = "API usage limit reached. Check your plan/credits."
PROCESSING_FAILED_MESSAGE = "Failed to process the document."
NO_TEXT_MESSAGE = (
    "Could not extract text. The file may be empty or a scanned PDF (image only)."
)


def get_completion_backend() -> CompletionBackend:
    """Dependency returning the summarization backend; override it in tests."""
    if not is_configured():
        raise HTTPException(
            status_code=500,
            detail={"error": "not_configured", "message": "OPENAI_API_KEY is missing."}
        )
    return get_client()


def _http_error_from(e: Exception, tag: str, request_id: str) -> HTTPException:
    """Translate a pipeline failure into the HTTPException returned to the client."""
    if isinstance(e, LLMRateLimitError):
        logger.warning(f"[{tag}] RATE_LIMITED | request_id={request_id} | error={e}")
        return HTTPException(
            status_code=429,
            detail={"error": e.code, "message": RATE_LIMIT_MESSAGE}
        )

    logger.error(f"[{tag}] ERROR | request_id={request_id} | error={e}")
    if isinstance(e, LLMConfigurationError):
        return HTTPException(status_code=500, detail={"error": e.code, "message": str(e)})
    return HTTPException(
        status_code=500,
        detail={"error": "processing_failed", "message": PROCESSING_FAILED_MESSAGE}
    )


async def read_upload(file: UploadFile, max_mb: int) -> bytes:
    """
    Read an upload, rejecting it once it is known to exceed max_mb.

    The declared size is checked before reading, and at most one byte past
    the limit is ever read, so oversized uploads are never buffered whole.
    """
    if file.size is not None:
        validate_file_size(file.size, max_mb, "Summarization")

    content = await file.read(max_mb * 1024 * 1024 + 1)
    validate_file_size(len(content), max_mb, "Summarization")
    return content


def _build_response(result: dict, request_id: str, user_id: Optional[str]) -> SummarizationResponse:
    return SummarizationResponse(
        request_id=request_id,
        summary=result["summary"],
        mode=result["mode"],
        method=result["method"],
        total_chunks=result["total_chunks"],
        total_chars=result["total_chars"],
        model=result["model"],
        user_id=user_id
    )


# =====================
# API Endpoints
# =====================

@router.post("/file", response_model=SummarizationResponse)
async def summarize_file_endpoint(
    file: Optional[UploadFile] = File(None, description="File to summarize (PDF, DOCX, TXT)"),
    mode: Optional[str] = Query(None, description="short | detailed (default: detailed)"),
    mode_form: Optional[str] = Form(None, alias="mode", description="Same as the mode query parameter"),
    request_id: Optional[str] = Form(None, description="Request ID (generated if not provided)"),
    user_id: Optional[str] = Form(None, description="User identifier for logging"),
    backend: CompletionBackend = Depends(get_completion_backend),
):
    """
    Summarize an uploaded file: File → Extraction → Chunking → Summarization

    **Modes:**
    - `short`: 5–8 sentence summary
    - `detailed`: bullet topics, key points and next steps (default)

    Unknown modes fall back to `detailed`.
    """
    request_id = request_id or str(uuid.uuid4())

    with RequestContext(request_id), UserContext(user_id):
        if file is None or not file.filename:
            raise HTTPException(
                status_code=400,
                detail={"error": "missing_file", "message": "No file uploaded."}
            )

        filename = file.filename
        file_ext = os.path.splitext(filename)[1].lower()

        if file_ext not in EXTRACTOR_SUPPORTED_FILE_TYPES:
            raise HTTPException(
                status_code=400,
                detail={
                    "error": "unsupported_file_type",
                    "message": f"Invalid format {file_ext or '(none)'}. Use PDF, DOCX or TXT."
                }
            )

        summary_mode = SummaryMode.parse(mode or mode_form)
        logger.info(f"[SUMMARIZE_FILE] START | filename={filename} | mode={summary_mode.value}")

        try:
            content = await read_upload(file, EXTRACTOR_MAX_FILE_SIZE_MB)
        except ValueError as e:
            raise HTTPException(status_code=413, detail={"error": "file_too_large", "message": str(e)})

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(delete=False, suffix=file_ext) as temp_file:
                temp_file.write(content)
                temp_path = temp_file.name

            raw_text = await run_in_threadpool(TextExtractor().extract, temp_path)
        except Exception as e:
            raise _http_error_from(e, "SUMMARIZE_FILE", request_id)
        finally:
            # Remove the upload even when extraction fails
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

        text = normalize_extracted_text(raw_text)
        try:
            validate_min_text_length(text, SUMMARIZATION_MIN_TEXT_CHARS, "Summarization")
        except ValueError:
            raise HTTPException(status_code=400, detail={"error": "no_text", "message": NO_TEXT_MESSAGE})

        try:
            result = await summarize_document(text, mode=summary_mode, backend=backend)
        except Exception as e:
            raise _http_error_from(e, "SUMMARIZE_FILE", request_id)

        logger.info(f"[SUMMARIZE_FILE] END | method={result['method']} | chunks={result['total_chunks']}")
        return _build_response(result, request_id, user_id)


@router.post("/text", response_model=SummarizationResponse)
async def summarize_text_endpoint(
    request: TextSummarizationRequest,
    backend: CompletionBackend = Depends(get_completion_backend),
):
    """
    Summarize text that was already extracted: Text → Chunking → Summarization
    """
    request_id = request.request_id or str(uuid.uuid4())

    with RequestContext(request_id), UserContext(request.user_id):
        text = normalize_extracted_text(request.text)
        try:
            validate_min_text_length(text, SUMMARIZATION_MIN_TEXT_CHARS, "Summarization")
        except ValueError as e:
            raise HTTPException(status_code=400, detail={"error": "text_too_short", "message": str(e)})

        summary_mode = SummaryMode.parse(request.mode)
        logger.info(f"[SUMMARIZE_TEXT] START | chars={len(text)} | mode={summary_mode.value}")

        try:
            result = await summarize_document(
                text,
                mode=summary_mode,
                backend=backend,
                target_size=request.chunk_size
            )
        except Exception as e:
            raise _http_error_from(e, "SUMMARIZE_TEXT", request_id)

        logger.info(f"[SUMMARIZE_TEXT] END | method={result['method']} | chunks={result['total_chunks']}")
        return _build_response(result, request_id, request.user_id)


@router.get("/modes")
async def get_summary_modes():
    """
    Get available summary modes and their descriptions.
    """
    return {
        "modes": {
            SummaryMode.SHORT.value: "Single 5–8 sentence summary of the whole document.",
            SummaryMode.DETAILED.value: "Bullet topics, key points and next steps, 200–300 words.",
        },
        "default": SUMMARIZATION_DEFAULT_MODE,
        "supported_file_types": sorted(EXTRACTOR_SUPPORTED_FILE_TYPES),
    }


@router.get("/config")
async def get_default_config():
    """
    Get the effective summarization configuration.
    """
    return {
        "chunk_size": SUMMARIZATION_CHUNK_SIZE,
        "max_concurrent": SUMMARIZATION_MAX_CONCURRENT,
        "min_text_chars": SUMMARIZATION_MIN_TEXT_CHARS,
        "chunk_model": SUMMARIZATION_CHUNK_MODEL,
        "aggregate_model": SUMMARIZATION_AGGREGATE_MODEL,
        "max_file_size_mb": EXTRACTOR_MAX_FILE_SIZE_MB,
        "backend": get_backend_info(),
        "pipeline": {
            "file_input": "File → Extraction → Chunking → Summarization",
            "text_input": "Text → Chunking → Summarization"
        }
    }
