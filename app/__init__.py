"""
PDF RAG Backend Application

A small retrieval-augmented question answering service over PDF documents.

Features:
- PDF ingestion by URL with optional page removal
- Recursive character chunking with overlap
- OpenAI embeddings stored in a Pinecone index
- Question answering with an OpenAI chat model over retrieved chunks
"""

__version__ = "1.0.0"
__author__ = "PDF RAG Team"
__description__ = "Retrieval-augmented question answering over PDF documents"
