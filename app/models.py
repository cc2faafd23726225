"""
Pydantic models for request/response validation.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    """Request model for PDF upload by URL."""
    model_config = ConfigDict(populate_by_name=True)

    paper_url: Optional[str] = Field(default=None, alias="paperUrl", description="URL of the PDF to ingest")
    name: Optional[str] = Field(default=None, description="Document name used to tag stored chunks")
    pages_to_delete: Optional[List[int]] = Field(
        default=None,
        alias="pagesToDelete",
        description="1-based page numbers (original numbering, ascending) to remove before indexing"
    )


class UploadResponse(BaseModel):
    """Response model for PDF upload."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: str = Field(..., description="Success message")
    document_count: int = Field(..., alias="documentCount", description="Number of chunks stored")
    name: str = Field(..., description="Document name the chunks were tagged with")


class ChatRequest(BaseModel):
    """Request model for chat queries."""
    message: Optional[str] = Field(default=None, description="User's question")
    k: int = Field(default=4, ge=1, description="Number of chunks to retrieve")


class RelevantDocument(BaseModel):
    """A retrieved chunk returned alongside the answer."""
    content: str = Field(..., description="Chunk text")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Chunk metadata")


class ChatResponse(BaseModel):
    """Response model for chat queries."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: str = Field(..., description="The user's question, echoed back")
    response: str = Field(..., description="Generated answer")
    relevant_documents: List[RelevantDocument] = Field(
        default_factory=list,
        alias="relevantDocuments",
        description="Chunks used as context"
    )


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Health status")
    message: str = Field(..., description="Status message")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Current timestamp")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str = Field(..., description="Error message")
