"""
FastAPI application for the PDF RAG Backend.
"""

from typing import Optional
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .config import Settings, settings as default_settings
from .errors import InvalidInputError, RagServiceError
from .models import (
    UploadRequest, UploadResponse, ChatRequest, ChatResponse,
    RelevantDocument, HealthResponse, ErrorResponse
)
from .services import DocumentService
from .utils import format_timestamp, normalize_document_name

# Configure logging
logging.basicConfig(level=getattr(logging, default_settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


def get_document_service(request: Request) -> DocumentService:
    """Return the DocumentService owned by the running application."""
    return request.app.state.document_service


async def rag_error_handler(request: Request, exc: RagServiceError) -> JSONResponse:
    """Convert application errors into ``{"error": ...}`` bodies."""
    logger.error(f"{request.url.path} failed ({type(exc).__name__}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump()
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as client errors."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"

    logger.warning(f"{request.url.path} rejected: {message}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=message).model_dump()
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for errors raised outside the endpoint bodies."""
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=str(exc) or "An unknown error occurred").model_dump()
    )


def create_app(
    settings: Optional[Settings] = None,
    document_service: Optional[DocumentService] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    The DocumentService, and with it the vector store handle, is created once
    here and shared by every request.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Retrieval-augmented question answering over PDF documents",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.document_service = document_service or DocumentService(settings)

    app.add_exception_handler(RagServiceError, rag_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Liveness check; does not touch the vector store or providers."""
        return HealthResponse(
            status="ok",
            message="RAG API is running",
            version=settings.app_version,
            timestamp=format_timestamp()
        )

    @app.post("/upload", response_model=UploadResponse)
    def upload_pdf(
        request: UploadRequest,
        document_service: DocumentService = Depends(get_document_service)
    ):
        """Fetch a PDF by URL, optionally drop pages, and index its chunks."""
        try:
            if not request.paper_url:
                raise InvalidInputError("paperUrl is required")

            name = normalize_document_name(request.name)
            chunks = document_service.process_pdf_from_url(
                paper_url=request.paper_url,
                name=name,
                pages_to_delete=request.pages_to_delete
            )

            return UploadResponse(
                message="PDF processed successfully",
                document_count=len(chunks),
                name=name
            )

        except RagServiceError:
            raise
        except Exception as e:
            logger.error(f"Upload error: {str(e)}")
            raise RagServiceError(str(e) or "An unknown error occurred") from e

    @app.post("/chat", response_model=ChatResponse)
    def chat_with_documents(
        request: ChatRequest,
        document_service: DocumentService = Depends(get_document_service)
    ):
        """Answer a question from the indexed documents."""
        try:
            answer, relevant_docs = document_service.chat_with_documents(
                question=request.message,
                k=request.k
            )

            return ChatResponse(
                message=request.message,
                response=answer,
                relevant_documents=[
                    RelevantDocument(content=doc.page_content, metadata=doc.metadata)
                    for doc in relevant_docs
                ]
            )

        except RagServiceError:
            raise
        except Exception as e:
            logger.error(f"Chat error: {str(e)}")
            raise RagServiceError(str(e) or "An unknown error occurred") from e

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=default_settings.port,
        reload=default_settings.debug
    )
