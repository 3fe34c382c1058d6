"""Planning document agent — turns a finished wizard session into the five documents."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Callable

from openai import OpenAIError

from aibuddy.agents.base import BaseAgent, extract_json
from aibuddy.agents.documents.prompts import FALLBACK_CONTENT, build_document_prompt
from aibuddy.schemas.documents import DocumentType, OutputDocument
from aibuddy.schemas.session import ChatSession

logger = logging.getLogger(__name__)

DOCUMENT_TEMPERATURE = 0.7
DOCUMENT_MAX_TOKENS = 4_000

DocumentCallback = Callable[[DocumentType, OutputDocument], None]


class DocumentAgent(BaseAgent):
    """Generates planning documents; a failed generation yields fallback content."""

    @property
    def name(self) -> str:
        return "Planning Documents"

    def parse_output(self, raw_text: str) -> dict[str, Any]:
        return extract_json(raw_text)

    async def generate(self, doc_type: DocumentType, session: ChatSession) -> OutputDocument:
        """Generate one document for ``session``.

        API errors and unparseable replies are logged and replaced with the
        type's placeholder content (``is_fallback=True``).
        """
        messages: list[dict[str, Any]] = [
            {"role": "user", "content": build_document_prompt(doc_type, session)},
        ]
        try:
            raw = await self.client.chat_completion(
                messages=messages,
                temperature=DOCUMENT_TEMPERATURE,
                max_tokens=DOCUMENT_MAX_TOKENS,
                json_mode=True,
            )
            content = await self._parse_with_retry(
                raw,
                messages,
                temperature=DOCUMENT_TEMPERATURE,
                max_tokens=DOCUMENT_MAX_TOKENS,
            )
            # pydantic's ValidationError is a ValueError
            document = OutputDocument(session_id=session.id, type=doc_type, content=content)
        except (OpenAIError, ValueError) as exc:
            logger.error("Error generating %s document: %s", doc_type.value, exc)
            return OutputDocument(
                session_id=session.id,
                type=doc_type,
                content=copy.deepcopy(FALLBACK_CONTENT[doc_type]),
                is_fallback=True,
            )

        logger.info("Generated %s document for session %s", doc_type.value, session.id)
        return document

    async def generate_all(
        self,
        session: ChatSession,
        *,
        on_document: DocumentCallback | None = None,
    ) -> list[OutputDocument]:
        """Generate all five documents concurrently, in ``DocumentType`` order."""

        async def _one(doc_type: DocumentType) -> OutputDocument:
            document = await self.generate(doc_type, session)
            if on_document:
                on_document(doc_type, document)
            return document

        return list(await asyncio.gather(*(_one(t) for t in DocumentType)))
