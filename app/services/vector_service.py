"""
Vector database service for managing embeddings and similarity search.
"""

import threading
from typing import List, Optional
from pinecone import Pinecone
from langchain_pinecone import PineconeVectorStore
from langchain_openai import OpenAIEmbeddings
from langchain_core.documents import Document
from langchain_core.vectorstores import VectorStore

from ..config import Settings, get_settings, validate_required_settings
from ..errors import NotReadyError, UpstreamError
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class VectorService:
    """Service owning the embedding client and the Pinecone-backed vector store."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the vector service. No connection is opened until the first store."""
        self.settings = settings or get_settings()
        self._vector_store: Optional[VectorStore] = None
        self._lock = threading.Lock()

    @property
    def has_documents(self) -> bool:
        """Whether a vector store handle exists for this process."""
        return self._vector_store is not None

    def _initialize_embeddings(self) -> OpenAIEmbeddings:
        """Initialize OpenAI embeddings."""
        embeddings = OpenAIEmbeddings(
            model=self.settings.openai_embedding_model,
            api_key=self.settings.openai_api_key,
            max_retries=self.settings.embedding_max_retries,
            chunk_size=self.settings.embedding_batch_size
        )

        log_processing_info("Embeddings initialized", {
            "model": self.settings.openai_embedding_model,
            "max_retries": self.settings.embedding_max_retries
        })

        return embeddings

    def _initialize_vector_store(self) -> VectorStore:
        """Connect to the configured Pinecone index."""
        client = Pinecone(api_key=self.settings.pinecone_api_key)
        index = client.Index(
            self.settings.pinecone_index_name,
            pool_threads=self.settings.embedding_max_concurrency
        )
        vector_store = PineconeVectorStore(
            index=index,
            embedding=self._initialize_embeddings()
        )

        log_processing_info("Pinecone vector store initialized", {
            "index_name": self.settings.pinecone_index_name,
            "pool_threads": self.settings.embedding_max_concurrency
        })

        return vector_store

    def _add_to_vector_store(self, documents: List[Document]) -> None:
        # The handle is published only after its first write succeeds.
        with self._lock:
            if self._vector_store is None:
                vector_store = self._initialize_vector_store()
                vector_store.add_documents(documents)
                self._vector_store = vector_store
                return

        self._vector_store.add_documents(documents)

    @measure_time
    def store(self, chunks: List[Document], name: str) -> None:
        """
        Embed chunks and add them to the vector index.

        Every chunk is tagged with ``documentName``. The vector store handle is
        created on the first call and reused afterwards.

        Args:
            chunks: Chunked Document objects
            name: Document name to tag the chunks with

        Raises:
            ConfigurationError: If a credential or the index name is missing
            UpstreamError: If embedding or upserting fails
        """
        validate_required_settings(
            self.settings,
            "openai_api_key",
            "pinecone_api_key",
            "pinecone_index_name"
        )

        tagged_chunks = [
            Document(
                page_content=chunk.page_content,
                metadata={**chunk.metadata, "documentName": name}
            )
            for chunk in chunks
        ]

        try:
            self._add_to_vector_store(tagged_chunks)
        except Exception as e:
            handle_processing_error(
                "document_storage",
                e,
                {
                    "index_name": self.settings.pinecone_index_name,
                    "document_count": len(tagged_chunks)
                }
            )
            raise UpstreamError(str(e)) from e

        log_processing_info("Documents stored successfully", {
            "index_name": self.settings.pinecone_index_name,
            "document_name": name,
            "document_count": len(tagged_chunks)
        })

    @measure_time
    def search(self, query: str, k: Optional[int] = None) -> List[Document]:
        """
        Return the ``k`` chunks nearest to the query.

        Raises:
            NotReadyError: If nothing has been stored yet in this process
            UpstreamError: If the query embedding or the index lookup fails
        """
        if k is None:
            k = self.settings.similarity_search_k

        vector_store = self._vector_store
        if vector_store is None:
            raise NotReadyError("No documents uploaded yet")

        try:
            similar_docs = vector_store.similarity_search(query, k=k)
        except Exception as e:
            handle_processing_error(
                "similarity_search",
                e,
                {"query_length": len(query), "k": k}
            )
            raise UpstreamError(str(e)) from e

        log_processing_info("Similarity search completed", {
            "query_length": len(query),
            "results_count": len(similar_docs),
            "k": k
        })

        return similar_docs
