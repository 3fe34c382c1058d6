"""Tests for the planning document agent."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from openai import OpenAIError

from aibuddy.agents.documents.agent import DOCUMENT_MAX_TOKENS, DocumentAgent
from aibuddy.agents.documents.prompts import (
    FALLBACK_CONTENT,
    NOT_SPECIFIED,
    build_document_prompt,
    render_session_block,
)
from aibuddy.schemas.documents import DocumentType, OutputDocument
from aibuddy.schemas.session import ChatSession


@pytest.fixture
def session() -> ChatSession:
    return ChatSession(
        title="Invoice automation",
        industry="Retail",
        business_problem="Invoice entry is slow",
        budget="$50k",
    )


class TestPrompts:
    def test_session_block(self, session) -> None:
        block = render_session_block(session)
        assert "Industry: Retail" in block
        assert "Business Problem: Invoice entry is slow" in block
        assert f"Timeline: {NOT_SPECIFIED}" in block
        assert block.endswith("Budget: $50k")

    @pytest.mark.parametrize("doc_type", list(DocumentType))
    def test_every_type_has_a_prompt(self, doc_type, session) -> None:
        prompt = build_document_prompt(doc_type, session)
        assert "Invoice entry is slow" in prompt
        assert "{session}" not in prompt

    def test_prompt_role(self, session) -> None:
        assert "cost estimation specialist" in build_document_prompt(DocumentType.COST, session)
        assert "ethics and implementation specialist" in build_document_prompt(DocumentType.AI, session)


class TestDocumentAgent:
    @pytest.mark.asyncio
    async def test_generate(self, mock_llm_client, openai_response, session) -> None:
        payload = {"title": "Rollout Plan", "overview": "Phased", "roles": []}
        create = AsyncMock(return_value=openai_response(json.dumps(payload)))
        mock_llm_client._client.chat.completions.create = create

        document = await DocumentAgent(mock_llm_client).generate(DocumentType.IMPLEMENTATION, session)

        assert document.content == payload
        assert document.title == "Rollout Plan"
        assert document.session_id == session.id
        assert document.is_fallback is False
        kwargs = create.call_args.kwargs
        assert kwargs["max_tokens"] == DOCUMENT_MAX_TOKENS
        assert kwargs["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in kwargs["messages"]] == ["user"]

    @pytest.mark.asyncio
    async def test_api_error_returns_fallback(self, mock_llm_client, session) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(side_effect=OpenAIError("boom"))

        document = await DocumentAgent(mock_llm_client).generate(DocumentType.COST, session)

        assert document.is_fallback is True
        assert document.content == FALLBACK_CONTENT[DocumentType.COST]
        assert document.content is not FALLBACK_CONTENT[DocumentType.COST]

    @pytest.mark.asyncio
    async def test_unparseable_reply_returns_fallback(self, mock_llm_client, openai_response, session) -> None:
        create = AsyncMock(return_value=openai_response("no json here"))
        mock_llm_client._client.chat.completions.create = create

        document = await DocumentAgent(mock_llm_client).generate(DocumentType.DESIGN, session)

        assert document.is_fallback is True
        assert document.title == "AI Solution Design Concept"
        # One re-format request before giving up.
        assert create.await_count == 2

    @pytest.mark.asyncio
    async def test_generate_all(self, mock_llm_client, openai_response, session) -> None:
        async def _reply(**kwargs):
            prompt = kwargs["messages"][0]["content"]
            if "business case specialist" in prompt:
                raise OpenAIError("unavailable")
            return openai_response(json.dumps({"title": "Generated"}))

        mock_llm_client._client.chat.completions.create = AsyncMock(side_effect=_reply)
        seen: list[DocumentType] = []

        documents = await DocumentAgent(mock_llm_client).generate_all(
            session, on_document=lambda doc_type, _doc: seen.append(doc_type),
        )

        assert [d.type for d in documents] == list(DocumentType)
        assert sorted(seen, key=list(DocumentType).index) == list(DocumentType)
        fallbacks = [d.type for d in documents if d.is_fallback]
        assert fallbacks == [DocumentType.BUSINESS]

    @pytest.mark.asyncio
    async def test_generate_all_with_array_replies(self, mock_llm_client, openai_response) -> None:
        create = AsyncMock(return_value=openai_response('```json\n[{"title": "x"}]\n```'))
        mock_llm_client._client.chat.completions.create = create

        documents = await DocumentAgent(mock_llm_client).generate_all(ChatSession())

        assert [d.type for d in documents] == list(DocumentType)
        assert all(d.is_fallback for d in documents)
        assert documents[0].content == FALLBACK_CONTENT[DocumentType.IMPLEMENTATION]

    @pytest.mark.asyncio
    async def test_invalid_content_falls_back(self, mock_llm_client, openai_response, session) -> None:
        agent = DocumentAgent(mock_llm_client)
        agent._parse_with_retry = AsyncMock(return_value=["not", "a", "mapping"])
        mock_llm_client._client.chat.completions.create = AsyncMock(return_value=openai_response("{}"))

        document = await agent.generate(DocumentType.AI, session)

        assert document.is_fallback is True
        assert document.title == "AI Solution Considerations"


def test_title_falls_back_to_label() -> None:
    document = OutputDocument(session_id="s1", type=DocumentType.AI, content={})
    assert document.title == "AI Considerations"
