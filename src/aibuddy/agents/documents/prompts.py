"""Prompt templates and fallback content for the five planning documents."""

from __future__ import annotations

from typing import Any

from aibuddy.schemas.documents import DocumentType
from aibuddy.schemas.session import ChatSession

NOT_SPECIFIED = "Not specified"

SESSION_BLOCK = """\
Industry: {industry}
Business Problem: {business_problem}
Current Process: {current_process}
Available Data: {available_data}
Success Metrics: {success_metrics}
Stakeholders: {stakeholders}
Timeline: {timeline}
Budget: {budget}"""

IMPLEMENTATION_PROMPT = """\
You are an AI implementation specialist. Based on the following information about an AI solution, \
create a detailed implementation plan in JSON format.

{session}

Generate a comprehensive implementation plan with the following structure:
{{
  "title": "AI Solution Implementation Plan for [appropriate title based on business problem]",
  "overview": "A brief description of the implementation plan",
  "timeline": {{
    "overall": "Overall duration estimation",
    "phases": [
      {{"name": "Phase name (e.g., Discovery Phase (2-3 weeks))", "percentage": 15, "description": "Brief description of this phase"}}
    ]
  }},
  "roles": [{{"title": "Role title", "description": "Description of responsibilities"}}],
  "deliverables": [{{"title": "Deliverable name", "description": "Description of the deliverable"}}],
  "dependencies": [{{"title": "Dependency name", "description": "Description of the dependency"}}]
}}

Make the implementation plan realistic, practical, and tailored to the specific industry and business problem.
The plan should include at least 5 phases, 5 roles, 6 deliverables, and 3 dependencies.
Be specific in timelines, roles, and deliverables based on the information provided.
"""

COST_PROMPT = """\
You are an AI solution cost estimation specialist. Based on the following information about an AI solution, \
create a detailed cost estimate in JSON format.

{session}

Generate a comprehensive cost estimate with the following structure:
{{
  "title": "AI Solution Cost Estimate for [appropriate title based on business problem]",
  "overview": "A brief description of the cost estimate",
  "personnel": [{{"role": "Role title", "hours": 0, "rate": 0, "total": 0}}],
  "hardware": [{{"name": "Hardware/software item name", "quantity": 0, "unitCost": 0, "total": 0}}],
  "maintenance": [{{"name": "Maintenance item name", "cost": 0}}],
  "subtotals": {{"personnel": 0, "hardware": 0, "maintenance": 0}},
  "contingencyPercentage": 15,
  "contingency": 0,
  "totalImplementation": 0,
  "considerations": ["Cost consideration 1", "Cost consideration 2"]
}}

All amounts are in USD; rates are hourly and maintenance costs are annual.
Make the cost estimate realistic and tailored to the specific industry and business problem.
The estimate should include at least 5 personnel roles, 5 hardware/software items, and 4 maintenance items.
"""

DESIGN_PROMPT = """\
You are an AI solution design specialist. Based on the following information about an AI solution, \
create a detailed design concept in JSON format that includes visual mockups, interactive examples, \
and low-fidelity prototypes.

{session}

Generate a comprehensive design concept with the following structure:
{{
  "title": "AI Solution Design Concept for [appropriate title based on business problem]",
  "overview": "A brief description of the design concept",
  "interfaceComponents": [{{"name": "", "description": "", "features": [], "mockupDescription": ""}}],
  "userFlows": [{{"name": "", "steps": [], "diagramDescription": ""}}],
  "architecture": {{
    "description": "Description of the technical architecture",
    "components": [],
    "diagramElements": {{"nodes": [], "connections": [{{"from": "", "to": "", "label": ""}}]}}
  }},
  "integrations": [{{"system": "", "description": "", "dataFlow": ""}}],
  "personas": [{{"name": "", "role": "", "description": "", "interactions": []}}],
  "mockups": [{{"name": "", "description": "", "type": "dashboard|form|report|visualization|mobile|integration"}}],
  "prototypes": [{{"name": "", "description": "", "userInteractions": [], "keyFeaturesDemonstrated": []}}],
  "systemIntegrationDiagram": {{
    "description": "",
    "elements": [],
    "connections": [{{"from": "", "to": "", "type": "data|api|event", "description": ""}}]
  }}
}}

Make the design concept realistic, practical, and tailored to the specific industry and business problem.
For mockups and diagrams, provide detailed textual descriptions that could be used to generate actual visual representations.
Focus on how the AI solution would integrate with existing systems and workflows.
"""

BUSINESS_PROMPT = """\
You are an AI solution business case specialist. Based on the following information about an AI solution, \
create a detailed business case in JSON format.

{session}

Generate a comprehensive business case with the following structure:
{{
  "title": "AI Solution Business Case for [appropriate title based on business problem]",
  "executiveSummary": "",
  "problemStatement": "",
  "problemDetails": [],
  "proposedSolution": "",
  "solutionComponents": [],
  "financials": {{
    "initialInvestment": 0,
    "annualBenefit": 0,
    "paybackPeriod": "X months/years",
    "roi": "X%",
    "npv": 0,
    "benefitsBreakdown": [{{"name": "", "description": "", "value": 0}}]
  }},
  "nonFinancialBenefits": [],
  "risks": [{{"name": "", "description": "", "mitigation": ""}}],
  "recommendation": "",
  "nextSteps": []
}}

Make the business case realistic, persuasive, and tailored to the specific industry and business problem.
Use realistic financial figures, ROI calculations, and payback periods.
The business case should include at least 4 non-financial benefits and 4 risks with mitigations.
"""

AI_PROMPT = """\
You are an AI ethics and implementation specialist. Based on the following information about an AI solution, \
create detailed AI considerations in JSON format.

{session}

Generate comprehensive AI considerations with the following structure:
{{
  "title": "AI Solution Considerations for [appropriate title based on business problem]",
  "overview": "A brief overview of key AI considerations for this solution",
  "technical": [{{"name": "", "description": "", "considerations": []}}],
  "ethical": [{{"name": "", "description": "", "risks": [], "bestPractices": []}}],
  "organizational": [{{"name": "", "description": "", "recommendations": []}}],
  "recommendations": []
}}

Cover technical aspects like data requirements, model selection, and integration.
Cover ethical aspects like bias, fairness, and transparency.
Cover organizational aspects like change management, capability building, and governance.
Include at least 3 technical considerations, 3 ethical considerations, and 3 organizational considerations.
"""

PROMPTS: dict[DocumentType, str] = {
    DocumentType.IMPLEMENTATION: IMPLEMENTATION_PROMPT,
    DocumentType.COST: COST_PROMPT,
    DocumentType.DESIGN: DESIGN_PROMPT,
    DocumentType.BUSINESS: BUSINESS_PROMPT,
    DocumentType.AI: AI_PROMPT,
}

_FAILED = "Please try again later."

FALLBACK_CONTENT: dict[DocumentType, dict[str, Any]] = {
    DocumentType.IMPLEMENTATION: {
        "title": "AI Solution Implementation Plan",
        "overview": f"Could not generate a detailed implementation plan. {_FAILED}",
        "timeline": {"overall": "Error generating timeline", "phases": []},
        "roles": [],
        "deliverables": [],
        "dependencies": [],
    },
    DocumentType.COST: {
        "title": "AI Solution Cost Estimate",
        "overview": f"Could not generate a detailed cost estimate. {_FAILED}",
        "personnel": [],
        "hardware": [],
        "maintenance": [],
        "subtotals": {"personnel": 0, "hardware": 0, "maintenance": 0},
        "contingencyPercentage": 15,
        "contingency": 0,
        "totalImplementation": 0,
        "considerations": [],
    },
    DocumentType.DESIGN: {
        "title": "AI Solution Design Concept",
        "overview": f"Could not generate a detailed design concept. {_FAILED}",
        "interfaceComponents": [],
        "userFlows": [],
        "architecture": {"description": "", "components": []},
        "integrations": [],
        "personas": [],
        "mockups": [],
        "prototypes": [],
        "systemIntegrationDiagram": {"description": "", "elements": [], "connections": []},
    },
    DocumentType.BUSINESS: {
        "title": "AI Solution Business Case",
        "executiveSummary": f"Could not generate a detailed business case. {_FAILED}",
        "problemStatement": "",
        "problemDetails": [],
        "proposedSolution": "",
        "solutionComponents": [],
        "financials": {
            "initialInvestment": 0,
            "annualBenefit": 0,
            "paybackPeriod": "N/A",
            "roi": "N/A",
            "npv": 0,
            "benefitsBreakdown": [],
        },
        "nonFinancialBenefits": [],
        "risks": [],
        "recommendation": "",
        "nextSteps": [],
    },
    DocumentType.AI: {
        "title": "AI Solution Considerations",
        "overview": f"Could not generate detailed AI considerations. {_FAILED}",
        "technical": [],
        "ethical": [],
        "organizational": [],
        "recommendations": [],
    },
}


def render_session_block(session: ChatSession) -> str:
    return SESSION_BLOCK.format(
        industry=session.industry or NOT_SPECIFIED,
        business_problem=session.business_problem or NOT_SPECIFIED,
        current_process=session.current_process or NOT_SPECIFIED,
        available_data=session.available_data or NOT_SPECIFIED,
        success_metrics=session.success_metrics or NOT_SPECIFIED,
        stakeholders=session.stakeholders or NOT_SPECIFIED,
        timeline=session.timeline or NOT_SPECIFIED,
        budget=session.budget or NOT_SPECIFIED,
    )


def build_document_prompt(doc_type: DocumentType, session: ChatSession) -> str:
    return PROMPTS[doc_type].format(session=render_session_block(session))
