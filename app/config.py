"""
Configuration management for the PDF RAG Backend.
Handles environment variables and application settings.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    app_name: str = Field(default="PDF RAG Backend")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    port: int = Field(default=3001)
    log_level: str = Field(default="INFO")

    # OpenAI Configuration
    openai_api_key: Optional[str] = Field(default=None)
    openai_embedding_model: str = Field(default="text-embedding-3-small")
    openai_chat_model: str = Field(default="gpt-4o-mini")
    openai_temperature: float = Field(default=0.7)
    embedding_max_retries: int = Field(default=3)
    embedding_batch_size: int = Field(default=1000)
    embedding_max_concurrency: int = Field(default=10)

    # Pinecone Configuration
    pinecone_api_key: Optional[str] = Field(default=None)
    pinecone_index_name: Optional[str] = Field(default=None)

    # Chunking / Retrieval Configuration
    chunk_size: int = Field(default=1000)
    chunk_overlap: int = Field(default=200)
    similarity_search_k: int = Field(default=4)

    # PDF Fetching Configuration
    fetch_timeout_seconds: float = Field(default=60.0)
    pdf_temp_dir: Optional[str] = Field(default=None)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from environment


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def validate_required_settings(current: Settings, *names: str) -> None:
    """
    Validate that the named settings are present.

    Args:
        current: Settings instance to check
        names: Field names that must hold a non-empty value

    Raises:
        ConfigurationError: If any of the settings is missing
    """
    missing_settings = [
        name.upper() for name in names
        if not getattr(current, name, None)
    ]

    if missing_settings:
        noun = "variable is" if len(missing_settings) == 1 else "variables are"
        raise ConfigurationError(
            f"{', '.join(missing_settings)} environment {noun} required",
            details={"missing": missing_settings}
        )
