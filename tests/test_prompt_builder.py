"""Tests for preference-aware prompt construction."""

from __future__ import annotations

from aibuddy.prompting.builder import construct_preference_aware_prompt
from aibuddy.schemas.preferences import UserPreferences

QUERY = "How do I automate invoicing?"


class TestFallbackPrompt:
    def test_no_preferences(self) -> None:
        prompt = construct_preference_aware_prompt(QUERY, None)
        assert "has not set their preferences yet" in prompt
        assert prompt.endswith(f"User Query: {QUERY}")
        assert "Technical Context" not in prompt

    def test_exact_text(self) -> None:
        assert construct_preference_aware_prompt("Hi?", None) == (
            "You are an AI assistant. The user has not set their preferences yet. \n"
            "Please provide a general response to their query, and suggest they set up "
            "their preferences for more personalized assistance.\n"
            "\n"
            "User Query: Hi?"
        )

    def test_additional_context_ignored_without_preferences(self) -> None:
        prompt = construct_preference_aware_prompt(QUERY, None, {"industry": "retail"})
        assert "retail" not in prompt


class TestPreferenceAwarePrompt:
    def test_end_to_end(self, sample_preferences) -> None:
        prompt = construct_preference_aware_prompt(QUERY, sample_preferences)

        assert prompt.startswith("You are an AI assistant with access to the user's preferences and context.")
        assert "IMPORTANT BUDGET CONSTRAINT:" in prompt
        assert "The user has a strict budget of 100k-250k." in prompt
        assert "- Customer data integration and analysis" in prompt
        assert "- Advanced analytics and reporting" in prompt
        assert "- Integration with CRM system" in prompt
        assert "Use simple, direct questions with clear options" in prompt
        assert "Provide step-by-step explanations with basic terminology" in prompt
        assert "Feasibility Score: 4/10" in prompt
        assert "Complexity Level: 6/10" in prompt
        assert "Estimated Timeline: 3-6 months" in prompt
        assert prompt.endswith(f"User Query:\n{QUERY}")

    def test_section_order(self, sample_preferences) -> None:
        prompt = construct_preference_aware_prompt(QUERY, sample_preferences)
        headers = [
            "IMPORTANT BUDGET CONSTRAINT:",
            "Technical Context:",
            "Business Context:",
            "Implementation Context:",
            "Additional Context:",
            "Response Guidelines:",
            "Budget-Aware Solution Requirements:",
            "Relevant Examples:",
            "User Query:",
        ]
        positions = [prompt.index(header) for header in headers]
        assert positions == sorted(positions)

    def test_deterministic(self, sample_preferences) -> None:
        context = {"industry": "retail"}
        first = construct_preference_aware_prompt(QUERY, sample_preferences, context)
        second = construct_preference_aware_prompt(QUERY, sample_preferences, context)
        assert first == second

    def test_empty_preferences_keep_headers(self) -> None:
        prompt = construct_preference_aware_prompt(QUERY, UserPreferences())
        assert "IMPORTANT BUDGET CONSTRAINT" not in prompt
        assert "Capabilities:\n\nLimitations:" in prompt
        assert "Resource Requirements:\n\nAdditional Context:" in prompt
        assert "Relevant Examples:\n\nUser Query:" in prompt
        assert "- ROI alignment with expected timeframe" in prompt
        # Budget requirements are always listed, even with no budget set.
        assert "1. Always consider the budget constraint first" in prompt

    def test_additional_context_lines(self, sample_preferences) -> None:
        prompt = construct_preference_aware_prompt(
            QUERY, sample_preferences, {"industry": "retail", "team size": 12}
        )
        assert "Additional Context:\n- industry: retail\n- team size: 12\n\nResponse Guidelines:" in prompt

    def test_query_is_verbatim(self, sample_preferences) -> None:
        query = "Budget?  {not a template}\nsecond line"
        prompt = construct_preference_aware_prompt(query, sample_preferences)
        assert prompt.endswith(f"User Query:\n{query}")

    def test_under_budget_risks(self, prefs) -> None:
        prompt = construct_preference_aware_prompt(
            QUERY, prefs(growth_stage="mature", budget_range="<50k")
        )
        assert "- Growth stage: mature" in prompt
        assert "- Limited budget requires cost-effective solutions" in prompt
        assert "Relevant Examples:\n\nUser Query:" in prompt

    def test_undeclared_growth_stage_not_in_constraints(self, prefs) -> None:
        prompt = construct_preference_aware_prompt(QUERY, prefs(growth_stage="not-a-stage"))
        assert "not-a-stage" not in prompt
        assert "Constraints:\n\nRisk Factors:" in prompt
