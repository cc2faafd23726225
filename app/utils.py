"""
Utility functions for the PDF RAG Backend.
"""

import os
import time
import tempfile
import functools
from contextlib import contextmanager
from typing import Dict, Any, Iterator, Optional
from datetime import datetime, timezone
import logging

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


def format_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def measure_time(func):
    """Decorator to measure function execution time."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        execution_time = end_time - start_time

        logger.info(f"{func.__name__} executed in {execution_time:.2f} seconds")
        return result
    return wrapper


def validate_pdf_url(url: str) -> None:
    """
    Check that a URL points at a PDF.

    Only the literal, case-sensitive ``pdf`` suffix is checked; no content
    sniffing happens.

    Raises:
        InvalidInputError: If the URL does not end in ``pdf``
    """
    if not isinstance(url, str) or not url.endswith("pdf"):
        raise InvalidInputError("Must be a pdf", details={"url": url})


def normalize_document_name(name: Optional[str]) -> str:
    """Return the name chunks are tagged with, defaulting to ``unnamed``."""
    return name or "unnamed"


@contextmanager
def temporary_pdf(content: bytes, directory: Optional[str] = None) -> Iterator[str]:
    """
    Write PDF bytes to a uniquely named file and yield its path.

    The file is removed when the block exits, whether or not it raised.
    """
    if directory:
        os.makedirs(directory, exist_ok=True)

    fd, path = tempfile.mkstemp(suffix=".pdf", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def log_processing_info(operation: str, details: Dict[str, Any]) -> None:
    """Log processing information."""
    logger.info(f"{operation}: {details}")


def handle_processing_error(operation: str, error: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
    """Handle and log processing errors."""
    error_info = {
        'operation': operation,
        'error_type': type(error).__name__,
        'error_message': str(error),
        'timestamp': format_timestamp()
    }

    if context:
        error_info.update(context)

    logger.error(f"Processing error: {error_info}")
    return error_info
