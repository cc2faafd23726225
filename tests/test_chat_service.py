"""
Unit tests for prompt assembly and ChatService.
"""

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.documents import Document
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage

from app.errors import ConfigurationError, UpstreamError
from app.services.chat_service import ChatService, build_context, create_prompt, message_text


@pytest.fixture
def documents():
    return [
        Document(page_content="Paris is the capital of France.", metadata={"page": 0}),
        Document(page_content="France is in Europe.", metadata={"page": 1}),
    ]


def test_build_context_labels_documents_in_order(documents):
    assert build_context(documents) == (
        "Document 1:\nParis is the capital of France.\n\n"
        "Document 2:\nFrance is in Europe."
    )


def test_build_context_empty():
    assert build_context([]) == ""


def test_create_prompt_embeds_context_and_question():
    prompt = create_prompt("What is the capital?", "Document 1:\nParis.")

    assert prompt == (
        "Based on the following context documents, please answer the user's question. "
        "If the answer is not found in the context, please say so.\n"
        "\n"
        "Context:\n"
        "Document 1:\nParis.\n"
        "\n"
        "Question: What is the capital?\n"
        "\n"
        "Answer:"
    )


def test_question_with_braces_is_kept_literal():
    prompt = create_prompt("What does {x} mean?", "ctx")

    assert "Question: What does {x} mean?" in prompt


def test_message_text_keeps_plain_strings():
    assert message_text("Paris.") == "Paris."


def test_message_text_skips_non_text_blocks():
    content = [
        "The answer is ",
        {"type": "image_url", "image_url": {"url": "https://example.com/map.png"}},
        {"type": "text", "text": "Paris."},
    ]

    assert message_text(content) == "The answer is Paris."


class TestGenerateResponse:
    """Test suite for ChatService.generate_response."""

    def test_sends_single_prompt_and_returns_answer(self, settings, documents):
        service = ChatService(settings)
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="Paris.")

        with patch.object(service, "_initialize_llm", return_value=llm):
            answer = service.generate_response("What is the capital of France?", documents)

        assert answer == "Paris."
        llm.invoke.assert_called_once_with(
            create_prompt("What is the capital of France?", build_context(documents))
        )

    def test_works_with_a_chat_model(self, settings, documents):
        service = ChatService(settings)
        fake_llm = FakeListChatModel(responses=["The capital is Paris."])

        with patch.object(service, "_initialize_llm", return_value=fake_llm):
            assert service.generate_response("Capital?", documents) == "The capital is Paris."

    def test_content_blocks_are_joined_into_text(self, settings, documents):
        service = ChatService(settings)
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(
            content=[{"type": "text", "text": "Par"}, {"type": "text", "text": "is."}]
        )

        with patch.object(service, "_initialize_llm", return_value=llm):
            answer = service.generate_response("What is the capital of France?", documents)

        assert answer == "Paris."

    def test_missing_key_fails_before_model_creation(self, unconfigured_settings, documents):
        service = ChatService(unconfigured_settings)

        with patch.object(service, "_initialize_llm") as init:
            with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
                service.generate_response("Capital?", documents)

        init.assert_not_called()

    def test_provider_failure_becomes_upstream_error(self, settings, documents):
        service = ChatService(settings)
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("The model `gpt-4o-mini` is overloaded")

        with patch.object(service, "_initialize_llm", return_value=llm):
            with pytest.raises(UpstreamError, match="overloaded"):
                service.generate_response("Capital?", documents)

    def test_model_is_created_once(self, settings, documents):
        service = ChatService(settings)
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="ok")

        with patch.object(service, "_initialize_llm", return_value=llm) as init:
            service.generate_response("one", documents)
            service.generate_response("two", documents)

        assert init.call_count == 1

    def test_initialize_llm_uses_configured_model(self, settings):
        service = ChatService(settings)

        with patch("app.services.chat_service.ChatOpenAI") as chat_cls:
            llm = service._initialize_llm()

        chat_cls.assert_called_once_with(
            model="gpt-4o-mini",
            api_key="test-openai-key",
            temperature=0.7
        )
        assert llm is chat_cls.return_value
