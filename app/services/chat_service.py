"""
Chat service for generating responses using an OpenAI chat model.
"""

import threading
from typing import Any, Dict, List, Optional, Union
from langchain_openai import ChatOpenAI
from langchain_core.documents import Document
from langchain_core.language_models import BaseChatModel

from ..config import Settings, get_settings, validate_required_settings
from ..errors import UpstreamError
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Based on the following context documents, please answer the user's question. If the answer is not found in the context, please say so.

Context:
{context}

Question: {question}

Answer:"""


def build_context(documents: List[Document]) -> str:
    """Label each chunk "Document N" (1-based) and join them with blank lines."""
    return "\n\n".join(
        f"Document {index}:\n{doc.page_content}"
        for index, doc in enumerate(documents, start=1)
    )


def create_prompt(question: str, context: str) -> str:
    """Embed the context block and the literal question in the answer template."""
    return PROMPT_TEMPLATE.format(context=context, question=question)


def message_text(content: Union[str, List[Union[str, Dict[str, Any]]]]) -> str:
    """Flatten a chat message's content into plain text, keeping only text blocks."""
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatService:
    """Service for generating chat responses using LLM."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the chat service. The model client is created on first use."""
        self.settings = settings or get_settings()
        self._llm: Optional[BaseChatModel] = None
        self._lock = threading.Lock()

    def _initialize_llm(self) -> ChatOpenAI:
        """Initialize the language model."""
        llm = ChatOpenAI(
            model=self.settings.openai_chat_model,
            api_key=self.settings.openai_api_key,
            temperature=self.settings.openai_temperature
        )

        log_processing_info("LLM initialized", {
            "model": self.settings.openai_chat_model,
            "temperature": self.settings.openai_temperature
        })

        return llm

    def _get_llm(self) -> BaseChatModel:
        with self._lock:
            if self._llm is None:
                self._llm = self._initialize_llm()
            return self._llm

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when the OpenAI key is absent."""
        validate_required_settings(self.settings, "openai_api_key")

    @measure_time
    def generate_response(self, question: str, documents: List[Document]) -> str:
        """
        Generate an answer to the question from the retrieved documents.

        Args:
            question: User's question
            documents: Retrieved chunks, most relevant first

        Returns:
            The model's answer text

        Raises:
            ConfigurationError: If the OpenAI key is missing
            UpstreamError: If the chat completion call fails
        """
        self.ensure_configured()

        context = build_context(documents)
        prompt = create_prompt(question, context)

        try:
            response = self._get_llm().invoke(prompt)
        except Exception as e:
            handle_processing_error(
                "response_generation",
                e,
                {"question_length": len(question), "documents_count": len(documents)}
            )
            raise UpstreamError(str(e)) from e

        answer = message_text(response.content)

        log_processing_info("Response generated", {
            "question_length": len(question),
            "context_length": len(context),
            "answer_length": len(answer)
        })

        return answer
