"""
Exception hierarchy for the PDF RAG Backend.

Every error carries the HTTP status it maps to at the API boundary.
"""

from typing import Any, Dict, Optional


class RagServiceError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidInputError(RagServiceError):
    """Raised for missing or malformed request fields and non-PDF URLs."""

    status_code = 400


class NotReadyError(RagServiceError):
    """Raised when a query arrives before any document has been stored."""

    status_code = 400


class ConfigurationError(RagServiceError):
    """Raised when a required credential or index name is absent."""


class TransportError(RagServiceError):
    """Raised when fetching a remote resource fails at the network/HTTP level."""


class UpstreamError(RagServiceError):
    """Raised when a provider (PDF library, embeddings, vector DB, chat model) reports a failure."""
