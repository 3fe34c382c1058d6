"""Chat wizard agent — one assistant turn per user message."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from aibuddy.agents.base import BaseAgent
from aibuddy.agents.chat.extraction import extract_session_info, should_generate_outputs
from aibuddy.agents.chat.prompts import EMPTY_REPLY, SYSTEM_PROMPT
from aibuddy.schemas.session import ChatMessage, ChatSession, ChatTurn

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 500


def to_openai_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """Prefix the wizard system prompt and keep only user/assistant turns."""
    converted: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    for message in messages:
        if message.role in ("user", "assistant"):
            converted.append({"role": message.role, "content": message.content})
    return converted


class ChatAgent(BaseAgent):
    """Guides the user through describing their AI solution idea."""

    @property
    def name(self) -> str:
        return "AI Buddy"

    def parse_output(self, raw_text: str) -> str:
        return raw_text.strip() or EMPTY_REPLY

    async def respond(self, session: ChatSession, user_message: str) -> ChatTurn:
        """Record ``user_message``, ask the model for the next reply, update the session.

        Extracted fields are merged into the session before deciding whether
        the planning documents can be generated.
        """
        session.messages.append(ChatMessage(role="user", content=user_message))

        raw = await self.client.chat_completion(
            messages=to_openai_messages(session.messages),
            temperature=CHAT_TEMPERATURE,
            max_tokens=CHAT_MAX_TOKENS,
        )
        reply = self.parse_output(raw)
        session.messages.append(ChatMessage(role="assistant", content=reply))

        info = extract_session_info(session.messages)
        if info is not None:
            session.merge(info)
        ready = should_generate_outputs(session.messages, session)
        logger.debug(
            "Session %s: %d fields filled, ready=%s",
            session.id, session.filled_fields(), ready,
        )
        return ChatTurn(ai_response=reply, extracted_info=info, generate_outputs=ready)
