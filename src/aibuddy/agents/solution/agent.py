"""Solution agent — answers a free-text query with the preference-aware prompt."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from aibuddy.agents.base import BaseAgent, extract_json
from aibuddy.prompting.builder import construct_preference_aware_prompt
from aibuddy.prompting.transformer import determine_prompting_strategy
from aibuddy.schemas.preferences import UserPreferences
from aibuddy.schemas.solution import SolutionRequest, SolutionResponse
from aibuddy.shared.llm_client import TokensCallback

logger = logging.getLogger(__name__)

SOLUTION_MAX_TOKENS = 2_000
DEFAULT_TEMPERATURE = 0.7


def build_solution_request(
    query: str,
    preferences: UserPreferences | None,
    additional_context: Mapping[str, Any] | None = None,
) -> SolutionRequest:
    """Prepare the two-message exchange sent for a solution query."""
    system_prompt = construct_preference_aware_prompt(query, preferences, additional_context)
    if preferences is None:
        temperature = DEFAULT_TEMPERATURE
    else:
        temperature = determine_prompting_strategy(preferences, query).temperature

    return SolutionRequest(
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": query},
        ],
        temperature=temperature,
        max_tokens=SOLUTION_MAX_TOKENS,
    )


class SolutionAgent(BaseAgent):
    """Sends a solution request and parses the reply."""

    @property
    def name(self) -> str:
        return "Solution Generator"

    def parse_output(self, raw_text: str) -> SolutionResponse:
        data = extract_json(raw_text)
        return SolutionResponse(**data)

    async def generate(
        self,
        query: str,
        preferences: UserPreferences | None,
        additional_context: Mapping[str, Any] | None = None,
        *,
        on_tokens: TokensCallback | None = None,
    ) -> SolutionResponse:
        """Generate a solution for ``query``.

        A reply that is not JSON is kept whole as the ``solution`` text.
        """
        request = build_solution_request(query, preferences, additional_context)
        logger.info(
            "Requesting solution (temperature=%.1f, prompt=%d chars)",
            request.temperature,
            len(request.system_prompt),
        )
        raw = await self.client.chat_completion(
            messages=request.messages,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            on_tokens=on_tokens,
        )
        try:
            return self.parse_output(raw)
        except (ValueError, json.JSONDecodeError) as exc:
            logger.debug("Solution reply is plain text: %s", exc)
            return SolutionResponse(solution=raw.strip())
