"""
Main document service that orchestrates PDF ingestion, vector storage, and chat functionality.
"""

from typing import List, Optional, Sequence, Tuple
from langchain_core.documents import Document

from .pdf_processor import PDFProcessor
from .vector_service import VectorService
from .chat_service import ChatService
from ..config import Settings, get_settings
from ..errors import InvalidInputError, NotReadyError
from ..utils import (
    measure_time,
    log_processing_info
)
import logging

logger = logging.getLogger(__name__)


class DocumentService:
    """Main service for document processing and chat functionality."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        pdf_processor: Optional[PDFProcessor] = None,
        vector_service: Optional[VectorService] = None,
        chat_service: Optional[ChatService] = None
    ):
        """Initialize the document service."""
        self.settings = settings or get_settings()
        self.pdf_processor = pdf_processor or PDFProcessor(self.settings)
        self.vector_service = vector_service or VectorService(self.settings)
        self.chat_service = chat_service or ChatService(self.settings)

    @measure_time
    def process_pdf_from_url(
        self,
        paper_url: str,
        name: str,
        pages_to_delete: Optional[Sequence[int]] = None
    ) -> List[Document]:
        """
        Fetch a PDF, drop unwanted pages, chunk it and store the chunks.

        Args:
            paper_url: URL of the PDF; must end in ``pdf``
            name: Document name the chunks are tagged with
            pages_to_delete: Optional ascending 1-based page numbers to remove

        Returns:
            The chunks that were stored
        """
        log_processing_info("Document processing started", {
            "paper_url": paper_url,
            "name": name
        })

        pdf = self.pdf_processor.fetch_pdf(paper_url)
        if pages_to_delete:
            logger.info(f"Deleting pages: {', '.join(str(page) for page in pages_to_delete)}")
            pdf = self.pdf_processor.delete_pages(pdf, pages_to_delete)

        documents = self.pdf_processor.load_documents(pdf)
        chunks = self.pdf_processor.split_documents_into_chunks(documents)
        self.vector_service.store(chunks, name)

        log_processing_info("Document processing completed", {
            "name": name,
            "pages_loaded": len(documents),
            "chunks_created": len(chunks)
        })

        return chunks

    @measure_time
    def chat_with_documents(
        self,
        question: Optional[str],
        k: Optional[int] = None
    ) -> Tuple[str, List[Document]]:
        """
        Answer a question from the stored documents.

        Args:
            question: User's question
            k: Number of chunks to retrieve

        Returns:
            Tuple of (answer, relevant_documents)
        """
        if not question:
            raise InvalidInputError("message is required")

        if not self.vector_service.has_documents:
            raise NotReadyError("No documents uploaded yet")

        self.chat_service.ensure_configured()

        log_processing_info("Chat query started", {
            "question_length": len(question),
            "k": k
        })

        relevant_docs = self.vector_service.search(question, k=k)
        answer = self.chat_service.generate_response(question, relevant_docs)

        log_processing_info("Chat query completed", {
            "answer_length": len(answer),
            "documents_count": len(relevant_docs)
        })

        return answer, relevant_docs
