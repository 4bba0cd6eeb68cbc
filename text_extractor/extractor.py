"""
Text Extractor

Extracts plain text from PDF, DOCX and TXT files.
Paragraphs are separated by a blank line so the summarization chunker
can split on them.
"""

import re
import logging
from pathlib import Path
from typing import List

import fitz  # PyMuPDF for PDF
from docx import Document as DocxDocument
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph as DocxParagraph

from .config import EXTRACTOR_SUPPORTED_FILE_TYPES

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"

# Horizontal whitespace left at the end of lines by PDF/DOCX text layers
_TRAILING_SPACE_RE = re.compile(r"[^\S\n]+\n")


def normalize_extracted_text(text: str) -> str:
    """Trim the text and drop trailing spaces on each line, keeping blank lines."""
    return _TRAILING_SPACE_RE.sub("\n", text.strip())


class TextExtractor:
    """
    Extracts text from multiple file formats.

    Supported formats: PDF, DOCX, TXT
    """

    SUPPORTED_EXTENSIONS = EXTRACTOR_SUPPORTED_FILE_TYPES

    def extract(self, file_path: str) -> str:
        """
        Extract the raw text of a document.

        Args:
            file_path: Path to the file on disk

        Returns:
            Extracted text (not normalized)

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is not supported
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        extension = path.suffix.lower()
        if extension not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(f"Unsupported file type: {extension}")

        if extension == ".pdf":
            text = self._extract_pdf(path)
        elif extension == ".docx":
            text = self._extract_docx(path)
        else:
            text = self._extract_txt(path)

        logger.info(f"[EXTRACT] {path.name} | type={extension} | chars={len(text)}")
        return text

    # =====================
    # PDF Extraction
    # =====================

    def _extract_pdf(self, file_path: Path) -> str:
        """Extract text page by page using PyMuPDF."""
        doc = fitz.open(str(file_path))

        try:
            pages = [page.get_text("text") for page in doc]
        finally:
            doc.close()

        return PARAGRAPH_SEPARATOR.join(p.strip() for p in pages if p.strip())

    # =====================
    # DOCX Extraction
    # =====================

    def _extract_docx(self, file_path: Path) -> str:
        """Extract paragraphs and tables from DOCX in document order."""
        doc = DocxDocument(str(file_path))
        blocks: List[str] = []

        for element in doc.element.body:
            if element.tag.endswith("}p"):
                text = DocxParagraph(element, doc).text
                if text.strip():
                    blocks.append(text)

            elif element.tag.endswith("}tbl"):
                text = self._table_to_text(DocxTable(element, doc))
                if text:
                    blocks.append(text)

        return PARAGRAPH_SEPARATOR.join(blocks)

    def _table_to_text(self, table: DocxTable) -> str:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(" | ".join(cells))
        return "\n".join(rows)

    # =====================
    # TXT Extraction
    # =====================

    def _extract_txt(self, file_path: Path) -> str:
        """Extract text from plain text file."""
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()
