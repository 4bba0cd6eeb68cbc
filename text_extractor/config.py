"""
Text Extractor Configuration

Module-specific settings for document text extraction.
"""
import os

# =========================
# File Processing Settings
# =========================

# Supported file types for document processing
EXTRACTOR_SUPPORTED_FILE_TYPES = {".pdf", ".docx", ".txt"}

# =========================
# Processing Limits
# =========================

EXTRACTOR_MAX_FILE_SIZE_MB = int(os.getenv("EXTRACTOR_MAX_FILE_SIZE_MB", "15"))
