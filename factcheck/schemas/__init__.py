"""Pydantic schemas for structured data validation.

This package contains:
- search.py: Normalized search result bundles
- llm_outputs.py: Schemas for validating LLM outputs
- agent.py: Records for one agent run (execution, perception, verdict, result)
- api.py: Request schemas for the HTTP API

All LLM outputs are validated against Pydantic models BEFORE being used
by the rest of the system.
"""

from factcheck.schemas.search import (
    OrganicResult,
    Fact,
    KnowledgePanel,
    Answer,
    RelatedQuestion,
    SearchResultBundle,
)

from factcheck.schemas.llm_outputs import (
    Verdict,
    VERDICTS,
    MAX_SUB_QUERIES,
    DecompositionPlan,
    VerdictOutput,
)

from factcheck.schemas.agent import (
    Strategy,
    FALLBACK_MODEL_ID,
    SingleSearchResult,
    DecomposedSearchResult,
    ExecutionResult,
    PerceptionMetadata,
    Perception,
    Reasoning,
    ActionRecord,
    Phases,
    Summary,
    AgentSuccess,
    AgentFailure,
    AgentResult,
)

from factcheck.schemas.api import CheckRequest

__all__ = [
    # Search
    "OrganicResult",
    "Fact",
    "KnowledgePanel",
    "Answer",
    "RelatedQuestion",
    "SearchResultBundle",
    # LLM outputs
    "Verdict",
    "VERDICTS",
    "MAX_SUB_QUERIES",
    "DecompositionPlan",
    "VerdictOutput",
    # Agent
    "Strategy",
    "FALLBACK_MODEL_ID",
    "SingleSearchResult",
    "DecomposedSearchResult",
    "ExecutionResult",
    "PerceptionMetadata",
    "Perception",
    "Reasoning",
    "ActionRecord",
    "Phases",
    "Summary",
    "AgentSuccess",
    "AgentFailure",
    "AgentResult",
    # API
    "CheckRequest",
]
