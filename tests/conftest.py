"""
Shared test fixtures.

Provides: test settings, generated PDFs, a page-aware fake PDF loader and an
in-memory vector store standing in for Pinecone.
"""

from io import BytesIO
from typing import Callable, List
from unittest.mock import MagicMock, patch

import PyPDF2
import pytest
from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.vectorstores import InMemoryVectorStore

from app.config import Settings


def build_pdf(page_count: int) -> bytes:
    """Create a PDF whose page N (1-based) is 100 + N points wide."""
    writer = PyPDF2.PdfWriter()
    for page_number in range(1, page_count + 1):
        writer.add_blank_page(width=100 + page_number, height=200)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


def page_widths(pdf: bytes) -> List[int]:
    """Return the page widths of a PDF, in page order."""
    reader = PyPDF2.PdfReader(BytesIO(pdf))
    return [int(float(page.mediabox.width)) for page in reader.pages]


def page_text(original_page_number: int) -> str:
    return f"Page {original_page_number} discusses topic number {original_page_number} in detail."


class PageAwarePDFLoader:
    """Loader stand-in producing one Document per page, named by original page number."""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def load(self) -> List[Document]:
        with open(self.file_path, "rb") as handle:
            widths = page_widths(handle.read())
        return [
            Document(
                page_content=page_text(width - 100),
                metadata={"source": self.file_path, "page": index}
            )
            for index, width in enumerate(widths)
        ]


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Fully configured settings with a private temp directory for PDFs."""
    return Settings(
        openai_api_key="test-openai-key",
        pinecone_api_key="test-pinecone-key",
        pinecone_index_name="test-index",
        pdf_temp_dir=str(tmp_path / "pdfs"),
    )


@pytest.fixture
def unconfigured_settings(tmp_path) -> Settings:
    """Settings with every credential missing."""
    return Settings(
        openai_api_key=None,
        pinecone_api_key=None,
        pinecone_index_name=None,
        pdf_temp_dir=str(tmp_path / "pdfs"),
    )


@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    return build_pdf


@pytest.fixture
def in_memory_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(embedding=DeterministicFakeEmbedding(size=64))


@pytest.fixture
def patched_vector_store(in_memory_store):
    """Replace the Pinecone connection with an in-memory vector store."""
    with patch(
        "app.services.vector_service.VectorService._initialize_vector_store",
        return_value=in_memory_store,
    ) as init:
        yield init


@pytest.fixture
def patched_loader():
    with patch("app.services.pdf_processor.PyPDFLoader", PageAwarePDFLoader):
        yield


@pytest.fixture
def pdf_response(make_pdf):
    """Patch requests.get to serve a five-page PDF."""
    response = MagicMock()
    response.content = make_pdf(5)
    response.raise_for_status.return_value = None
    with patch("app.services.pdf_processor.requests.get", return_value=response) as get:
        yield get
