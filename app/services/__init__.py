"""
Services package for the PDF RAG Backend.
"""

from .pdf_processor import PDFProcessor
from .vector_service import VectorService
from .chat_service import ChatService
from .document_service import DocumentService

__all__ = [
    "PDFProcessor",
    "VectorService",
    "ChatService",
    "DocumentService"
]
