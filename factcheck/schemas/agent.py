"""Pydantic schemas for the records that flow through one agent run.

ExecutionResult and AgentResult are tagged unions: every consumer
dispatches on the concrete type instead of probing for optional fields.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from factcheck.schemas.llm_outputs import Verdict
from factcheck.schemas.search import SearchResultBundle

Strategy = Literal["single", "decomposed"]

FALLBACK_MODEL_ID = "error-fallback"


def utc_now() -> str:
    """ISO-8601 UTC timestamp, millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# EXECUTION
# =============================================================================

class SingleSearchResult(BaseModel):
    """One search over the claim (or the fallback after a failed fan-out)."""

    model_config = ConfigDict(frozen=True)

    strategy: Literal["single"] = "single"
    query: str
    bundle: SearchResultBundle


class DecomposedSearchResult(BaseModel):
    """Concurrent sub-searches merged into one evidence set."""

    model_config = ConfigDict(frozen=True)

    strategy: Literal["decomposed"] = "decomposed"
    sub_queries: list[str]
    reasoning: str = ""
    merged: SearchResultBundle
    per_query: list[SearchResultBundle]


ExecutionResult = Annotated[
    Union[SingleSearchResult, DecomposedSearchResult],
    Field(discriminator="strategy"),
]


# =============================================================================
# PERCEPTION
# =============================================================================

class PerceptionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    organic_results_count: int = 0
    has_knowledge_graph: bool = False
    people_also_ask_count: int = 0
    used_plan_decomposition: bool = False

    @property
    def organic_count(self) -> int:
        return self.organic_results_count

    @property
    def has_knowledge(self) -> bool:
        return self.has_knowledge_graph

    @property
    def paa_count(self) -> int:
        return self.people_also_ask_count

    @property
    def used_decomposition(self) -> bool:
        return self.used_plan_decomposition


class Perception(BaseModel):
    """Cleaned evidence snapshot handed to the reasoning step."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default_factory=utc_now)
    claim: str
    strategy: Strategy
    sub_queries: Optional[list[str]] = None
    evidence: SearchResultBundle
    # Untrimmed execution payload, kept for audit/debug only
    raw: dict[str, Any] = Field(default_factory=dict)
    metadata: PerceptionMetadata


# =============================================================================
# REASONING / ACTION
# =============================================================================

class Reasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default_factory=utc_now)
    claim: str
    verdict: Verdict
    explanation: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    sources_analyzed: int = Field(default=0, ge=0)
    model_id: str

    @property
    def is_fallback(self) -> bool:
        return self.model_id == FALLBACK_MODEL_ID


class ActionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default_factory=utc_now)
    claim: str
    actions_taken: list[str] = Field(default_factory=list)
    status: Literal["success", "failed"]
    error: Optional[str] = None


# =============================================================================
# AGENT RESULT
# =============================================================================

class Phases(BaseModel):
    model_config = ConfigDict(frozen=True)

    perception: Perception
    reasoning: Reasoning
    action: ActionRecord


class Summary(BaseModel):
    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    confidence: float
    sources_analyzed: int
    strategy: Strategy


class AgentSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    claim: str
    execution_time_ms: int = Field(..., ge=0)
    timestamp: str = Field(default_factory=utc_now)
    phases: Phases
    summary: Summary


class AgentFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    claim: str
    execution_time_ms: int = Field(..., ge=0)
    timestamp: str = Field(default_factory=utc_now)
    error: str


AgentResult = Annotated[
    Union[AgentSuccess, AgentFailure],
    Field(discriminator="status"),
]
