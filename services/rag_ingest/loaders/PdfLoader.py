"""Loader for uploaded PDF files: one Document per page with text."""

import asyncio
import io
import re

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from shared.helper.HelperConfig import HelperConfig
from shared.helper.time_helper import now_iso
from shared.models.document import Document, PdfMeta
from shared.models.errors import DocumentParseError, InputValidationError

PDF_CONTENT_TYPE = "application/pdf"
EMPTY_OR_CORRUPTED = "PDF appears to be empty or corrupted"


def _clean_page_text(text: str) -> str:
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def extract_page_texts(data: bytes) -> list[str]:
    """Extract the text of every page, in page order. Pages without text yield "".

    Raises:
        DocumentParseError: If the bytes are not a readable PDF.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        return [_clean_page_text(page.extract_text() or "") for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, TypeError, OSError) as exc:
        raise DocumentParseError(EMPTY_OR_CORRUPTED, f"Could not parse PDF: {exc}") from exc


class PdfLoader:
    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()

    @staticmethod
    def validate_upload(data: bytes, content_type: str | None) -> None:
        """Reject anything that is not a non-empty PDF upload before parsing.

        Raises:
            InputValidationError: On a non-PDF content type or an empty file.
        """
        if (content_type or "").split(";")[0].strip().lower() != PDF_CONTENT_TYPE:
            raise InputValidationError("Only PDF files are supported. Please upload a PDF file.")
        if not data:
            raise InputValidationError("The uploaded PDF file is empty.")

    async def do_load(self, data: bytes, filename: str, content_type: str | None) -> list[Document]:
        """Parse an uploaded PDF into page documents.

        Parsing is CPU-bound and runs in a worker thread.

        Args:
            data (bytes): Raw file content.
            filename (str): Original upload name, stored as the document source.
            content_type (str | None): MIME type reported by the client.

        Returns:
            list[Document]: One Document per page that has extractable text,
                carrying the 1-based page number.

        Raises:
            InputValidationError: If the upload is not a non-empty PDF.
            DocumentParseError: If the file is corrupted or has no extractable text.
        """
        self.validate_upload(data, content_type)
        pages = await asyncio.to_thread(extract_page_texts, data)
        if not pages:
            raise DocumentParseError(EMPTY_OR_CORRUPTED, f"'{filename}' has no pages.")

        timestamp = now_iso()
        documents = [
            Document(
                content=text,
                metadata=PdfMeta(source=filename, timestamp=timestamp, page_number=number, total_pages=len(pages)),
            )
            for number, text in enumerate(pages, start=1)
            if text
        ]
        if not documents:
            raise DocumentParseError(EMPTY_OR_CORRUPTED, f"'{filename}' has {len(pages)} page(s) but no extractable text.")

        self.logging.info("Parsed '%s': %d of %d page(s) with text.", filename, len(documents), len(pages))
        return documents
