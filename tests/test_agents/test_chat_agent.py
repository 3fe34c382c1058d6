"""Tests for the chat wizard agent."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from aibuddy.agents.chat.agent import CHAT_MAX_TOKENS, CHAT_TEMPERATURE, ChatAgent, to_openai_messages
from aibuddy.agents.chat.prompts import EMPTY_REPLY, SYSTEM_PROMPT
from aibuddy.schemas.session import ChatMessage, ChatSession


def test_to_openai_messages_drops_system_turns() -> None:
    converted = to_openai_messages([
        ChatMessage(role="system", content="internal note"),
        ChatMessage(role="user", content="hi"),
        ChatMessage(role="assistant", content="hello"),
    ])
    assert converted == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
    ]


class TestChatAgent:
    @pytest.mark.asyncio
    async def test_first_turn(self, mock_llm_client, openai_response) -> None:
        create = AsyncMock(return_value=openai_response("Which process is slowest?"))
        mock_llm_client._client.chat.completions.create = create
        session = ChatSession()

        turn = await ChatAgent(mock_llm_client).respond(session, "Automate business processes")

        assert turn.ai_response == "Which process is slowest?"
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert session.business_problem == "Automate business processes"
        assert turn.generate_outputs is False

        kwargs = create.call_args.kwargs
        assert kwargs["temperature"] == CHAT_TEMPERATURE
        assert kwargs["max_tokens"] == CHAT_MAX_TOKENS
        assert kwargs["messages"][0]["content"] == SYSTEM_PROMPT
        assert kwargs["messages"][-1] == {"role": "user", "content": "Automate business processes"}

    @pytest.mark.asyncio
    async def test_ready_after_second_exchange(self, mock_llm_client, openai_response) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=openai_response("Got it.")
        )
        agent = ChatAgent(mock_llm_client)
        session = ChatSession()

        await agent.respond(session, "Reduce returns in our retail stores")
        turn = await agent.respond(session, "Our budget is around $40k")

        assert len(session.messages) == 4
        assert session.industry == "Retail"
        assert session.budget == "Our budget is around $40k"
        assert turn.extracted_info is not None
        assert turn.generate_outputs is True

    @pytest.mark.asyncio
    async def test_empty_reply(self, mock_llm_client, openai_response) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(return_value=openai_response(None))
        session = ChatSession()

        turn = await ChatAgent(mock_llm_client).respond(session, "hello")

        assert turn.ai_response == EMPTY_REPLY
        assert session.messages[-1].content == EMPTY_REPLY

    @pytest.mark.asyncio
    async def test_existing_fields_not_cleared(self, mock_llm_client, openai_response) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(return_value=openai_response("ok"))
        session = ChatSession(budget="$100k")

        await ChatAgent(mock_llm_client).respond(session, "Forecast demand")

        assert session.budget == "$100k"
