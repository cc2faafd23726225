"""
PDF processing service: fetching, page removal, text extraction and chunking.
"""

import PyPDF2
import requests
from io import BytesIO
from typing import List, Optional, Sequence
from langchain_core.documents import Document
from langchain_community.document_loaders import PyPDFLoader
from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..config import Settings, get_settings
from ..errors import TransportError, UpstreamError
from ..utils import (
    measure_time,
    validate_pdf_url,
    temporary_pdf,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Service for fetching PDF files and turning them into text chunks."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the PDF processor."""
        self.settings = settings or get_settings()
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap
        )

    @measure_time
    def fetch_pdf(self, url: str) -> bytes:
        """
        Download a PDF and return its raw bytes.

        Args:
            url: Address of the PDF; must end in ``pdf``

        Returns:
            Response body as bytes

        Raises:
            InvalidInputError: If the URL does not end in ``pdf`` (no request is made)
            TransportError: If the request fails or returns a non-success status
        """
        validate_pdf_url(url)

        try:
            response = requests.get(url, timeout=self.settings.fetch_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            handle_processing_error("pdf_fetch", e, {"url": url})
            raise TransportError(str(e), details={"url": url}) from e

        log_processing_info("PDF fetched", {
            "url": url,
            "file_size": len(response.content)
        })
        return response.content

    def delete_pages(self, pdf: bytes, pages_to_delete: Optional[Sequence[int]]) -> bytes:
        """
        Remove pages from a PDF.

        Page numbers are 1-based and refer to the original numbering when given
        in ascending order: each deletion is applied at ``page - offset`` where
        the offset starts at 1 and grows by one per page already removed.

        Args:
            pdf: PDF file content as bytes
            pages_to_delete: Page numbers to remove, in ascending order

        Returns:
            The re-saved PDF, or the input unchanged when there is nothing to delete
        """
        if not pages_to_delete:
            return pdf

        try:
            reader = PyPDF2.PdfReader(BytesIO(pdf))
            total_pages = len(reader.pages)
        except Exception as e:
            handle_processing_error("pdf_page_deletion", e, {"file_size": len(pdf)})
            raise UpstreamError(f"Failed to read PDF: {e}") from e

        remaining = list(range(total_pages))
        for offset, page_number in enumerate(pages_to_delete, start=1):
            index = page_number - offset
            if index < 0 or index >= len(remaining):
                raise UpstreamError(
                    f"Page {page_number} is out of range for a document with {total_pages} pages",
                    details={"page": page_number, "total_pages": total_pages}
                )
            del remaining[index]

        writer = PyPDF2.PdfWriter()
        for index in remaining:
            writer.add_page(reader.pages[index])

        output = BytesIO()
        writer.write(output)

        log_processing_info("Pages deleted", {
            "pages_deleted": list(pages_to_delete),
            "original_pages": total_pages,
            "remaining_pages": len(remaining)
        })
        return output.getvalue()

    @measure_time
    def load_documents(self, pdf: bytes) -> List[Document]:
        """
        Extract one Document per page from PDF bytes.

        The bytes are written to a transient file for the loader; the file is
        removed afterwards even when loading fails.
        """
        with temporary_pdf(pdf, self.settings.pdf_temp_dir) as path:
            try:
                documents = PyPDFLoader(path).load()
            except Exception as e:
                handle_processing_error("pdf_extraction", e, {"file_size": len(pdf)})
                raise UpstreamError(f"Failed to load PDF: {e}") from e

        log_processing_info("PDF extraction completed", {
            "documents_created": len(documents),
            "file_size": len(pdf)
        })
        return documents

    def split_documents_into_chunks(self, documents: List[Document]) -> List[Document]:
        """
        Split documents into overlapping chunks for vector search.

        Args:
            documents: List of Document objects

        Returns:
            List of chunked Document objects carrying their source metadata
        """
        chunks = self.text_splitter.split_documents(documents)

        log_processing_info("Document chunking completed", {
            "original_documents": len(documents),
            "chunks_created": len(chunks)
        })

        return chunks
