"""Async OpenAI chat-completion wrapper with rate-limit retries.

``LLMClient`` is the only place that talks to the API. ``DryRunClient``
mirrors its interface and returns canned responses so every command can run
offline.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import random
import re
from typing import Any, Callable

from openai import AsyncOpenAI, APIConnectionError, APITimeoutError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 2_000

# Retry settings for rate-limit (429) errors
_RATE_LIMIT_MAX_RETRIES = 6
_RATE_LIMIT_BASE_DELAY = 2  # seconds — minimum floor for exponential backoff

TokensCallback = Callable[[int, int], None]
"""Called with (input_tokens, output_tokens) when a completion finishes."""


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from an OpenAI rate limit error.

    Checks the ``Retry-After`` header first, then falls back to parsing
    the "Please try again in Xs / Xms" substring from the error message.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    return None


class LLMClient:
    """Thin async wrapper around the OpenAI SDK.

    - ``chat_completion`` — send a prepared message list
    - ``simple_completion`` — system prompt + one user message
    """

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self.model = model or os.environ.get("AIBUDDY_MODEL", DEFAULT_MODEL)

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff on 429 errors.

        Waits at least as long as the suggested retry-after time and adds
        ±25% jitter. Requests that exceed the context window fail immediately.
        """
        for attempt in range(_RATE_LIMIT_MAX_RETRIES):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                if "request too large" in msg or "context_length_exceeded" in msg:
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise
                if attempt == _RATE_LIMIT_MAX_RETRIES - 1:
                    raise

                backoff = _RATE_LIMIT_BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)

                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _RATE_LIMIT_MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _RATE_LIMIT_MAX_RETRIES - 1:
                    raise
                backoff = _RATE_LIMIT_BASE_DELAY * (2 ** min(attempt, 3))
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(1.0, backoff + jitter)
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _RATE_LIMIT_MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def chat_completion(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float = 0.7,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = False,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        """Send ``messages`` as-is and return the assistant text ("" if none)."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._call_with_retry(**kwargs)
        usage = getattr(response, "usage", None)
        if on_tokens and usage:
            on_tokens(getattr(usage, "prompt_tokens", 0), getattr(usage, "completion_tokens", 0))
        return response.choices[0].message.content or ""

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        temperature: float = 0.7,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        """Single request/response with a system prompt and one user turn."""
        return await self.chat_completion(
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
            on_tokens=on_tokens,
        )


# ======================================================================
# Dry-run mock client — zero API calls
# ======================================================================

_DRY_RUN_JSON: dict[str, str] = {
    "solution": json.dumps({
        "solution": "Start with a document-extraction pilot on your existing invoices, "
                    "then route extracted data into your CRM.",
        "recommendations": [
            "Use a managed OCR service instead of training a custom model",
            "Pilot on one supplier before rolling out",
        ],
        "nextSteps": ["Collect 200 sample invoices", "Define accuracy targets"],
        "confidence": 0.8,
        "reasoning": "Low AI literacy and a fixed budget favour managed services.",
    }),
    "chat": "Thanks for sharing that. Which process takes your team the most time today?",
    "implementation": json.dumps({
        "title": "AI Solution Implementation Plan",
        "overview": "A phased rollout starting with a pilot.",
        "timeline": {
            "overall": "4 months",
            "phases": [{"name": "Discovery Phase (2-3 weeks)", "percentage": 15, "description": "Scope the pilot"}],
        },
        "roles": [{"title": "Project Manager", "description": "Owns delivery"}],
        "deliverables": [{"title": "Pilot", "description": "Working prototype"}],
        "dependencies": [{"title": "Data access", "description": "Read access to the CRM"}],
    }),
    "cost": json.dumps({
        "title": "AI Solution Cost Estimate",
        "overview": "Estimated costs for the pilot and rollout.",
        "personnel": [{"role": "ML Engineer", "hours": 320, "rate": 120, "total": 38400}],
        "hardware": [{"name": "Cloud compute", "quantity": 1, "unitCost": 6000, "total": 6000}],
        "maintenance": [{"name": "Model monitoring", "cost": 4000}],
        "subtotals": {"personnel": 38400, "hardware": 6000, "maintenance": 4000},
        "contingencyPercentage": 15,
        "contingency": 7260,
        "totalImplementation": 55660,
        "considerations": ["Costs assume a cloud deployment"],
    }),
    "design": json.dumps({
        "title": "AI Solution Design Concept",
        "overview": "A review dashboard backed by an extraction service.",
        "interfaceComponents": [{"name": "Review queue", "description": "Human-in-the-loop review",
                                 "features": ["Confidence badges"], "mockupDescription": "Table of items"}],
        "userFlows": [{"name": "Approve invoice", "steps": ["Open", "Check", "Approve"], "diagramDescription": ""}],
        "architecture": {"description": "Event-driven pipeline", "components": ["Ingest", "Extract", "Review"]},
        "integrations": [],
        "personas": [],
        "mockups": [],
        "prototypes": [],
        "systemIntegrationDiagram": {"description": "", "elements": [], "connections": []},
    }),
    "business": json.dumps({
        "title": "AI Solution Business Case",
        "executiveSummary": "Automating invoice entry pays back within a year.",
        "problemStatement": "Manual invoice entry is slow and error-prone.",
        "problemDetails": ["Two FTEs on data entry"],
        "proposedSolution": "Automated extraction with human review.",
        "solutionComponents": ["Extraction", "Review UI"],
        "financials": {"initialInvestment": 55000, "annualBenefit": 90000, "paybackPeriod": "8 months",
                       "roi": "64%", "npv": 120000, "benefitsBreakdown": []},
        "nonFinancialBenefits": ["Fewer errors"],
        "risks": [{"name": "Low accuracy", "description": "Unusual layouts", "mitigation": "Human review"}],
        "recommendation": "Proceed with the pilot.",
        "nextSteps": ["Approve budget"],
    }),
    "ai": json.dumps({
        "title": "AI Solution Considerations",
        "overview": "Key ethical and technical considerations.",
        "technical": [{"name": "Data quality", "description": "Scans vary", "considerations": ["Normalize inputs"]}],
        "ethical": [{"name": "Transparency", "description": "Explain decisions",
                     "risks": ["Opaque rejections"], "bestPractices": ["Log reviews"]}],
        "organizational": [{"name": "Change management", "description": "Reviewers need training",
                            "recommendations": ["Run onboarding sessions"]}],
        "recommendations": ["Keep a human in the loop"],
    }),
}


class DryRunClient:
    """Drop-in replacement for LLMClient that makes zero API calls."""

    model = "dry-run"

    async def chat_completion(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float = 0.7,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = False,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        system = next((m["content"] for m in messages if m.get("role") == "system"), "")
        user = next((m["content"] for m in reversed(messages) if m.get("role") == "user"), "")
        key = self._detect_kind(f"{system}\n{user}")
        logger.info("[dry-run] %s completion (temperature=%.1f)", key, temperature)
        return _DRY_RUN_JSON[key]

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        temperature: float = 0.7,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        return await self.chat_completion(
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )

    @staticmethod
    def _detect_kind(prompt: str) -> str:
        """Guess which canned response fits the prompt.

        Order matters — the AI considerations prompt also mentions an
        "implementation specialist".
        """
        if "AI Buddy" in prompt:
            return "chat"
        if "ethics and implementation specialist" in prompt:
            return "ai"
        if "implementation specialist" in prompt:
            return "implementation"
        if "cost estimation specialist" in prompt:
            return "cost"
        if "design specialist" in prompt:
            return "design"
        if "business case specialist" in prompt:
            return "business"
        return "solution"
