"""
Text Extractor Module

Extracts plain text from PDF, DOCX, TXT files.
"""

from .extractor import TextExtractor, normalize_extracted_text

__all__ = [
    "TextExtractor",
    "normalize_extracted_text"
]
