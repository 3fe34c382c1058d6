"""Base agent ABC — shared plumbing for the agents that call the model."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from aibuddy.shared.llm_client import LLMClient

logger = logging.getLogger(__name__)

REFORMAT_REQUEST = (
    "I need the output as a single JSON object (no markdown, no explanation — "
    "just raw JSON) matching the structure described in your instructions. "
    "Please re-format your response now."
)


class BaseAgent(ABC):
    """Abstract base class for every component that prompts the model.

    Subclasses implement ``name`` and ``parse_output``.
    """

    def __init__(self, client: LLMClient) -> None:
        self.client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logs and progress display."""

    @abstractmethod
    def parse_output(self, raw_text: str) -> Any:
        """Parse the model's final text into a result object."""

    async def _parse_with_retry(
        self,
        raw: str,
        messages: list[dict[str, Any]],
        *,
        temperature: float,
        max_tokens: int,
    ) -> Any:
        """Try to parse model output as JSON; on failure ask the model to re-format once.

        Raises the second parse error if the re-formatted reply is still unusable.
        """
        try:
            return self.parse_output(raw)
        except (ValueError, json.JSONDecodeError, KeyError) as first_err:
            logger.warning(
                "Agent %s output was not valid JSON, requesting re-format. Error: %s",
                self.name,
                first_err,
            )

        retry_messages = [
            *messages,
            {"role": "assistant", "content": raw},
            {"role": "user", "content": REFORMAT_REQUEST},
        ]
        raw_retry = await self.client.chat_completion(
            messages=retry_messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True,
        )
        logger.debug("Agent %s retry output:\n%s", self.name, raw_retry[:500])
        return self.parse_output(raw_retry)


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from text that may contain markdown fences."""
    text = text.strip()

    # 1. Try direct parse (clean JSON response)
    if text.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Might have trailing text — try raw_decode
            try:
                obj, _ = json.JSONDecoder().raw_decode(text)
                return obj
            except json.JSONDecodeError:
                pass

    # 2. Look for ```json ... ``` or ``` ... ``` fenced blocks
    match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if match:
        obj = json.loads(match.group(1).strip())
        if not isinstance(obj, dict):
            raise ValueError(
                f"Fenced JSON block is a {type(obj).__name__}, expected an object"
            )
        return obj

    # 3. Find the first { and try to parse a JSON object starting there
    try:
        start = text.index("{")
        obj, _ = json.JSONDecoder().raw_decode(text, idx=start)
        if isinstance(obj, dict):
            return obj
    except (ValueError, json.JSONDecodeError):
        pass

    raise ValueError(
        f"Could not extract JSON from model response (length={len(text)}). "
        f"First 300 chars: {text[:300]!r}"
    )
