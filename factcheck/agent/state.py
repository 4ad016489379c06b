"""LangGraph agent state schema."""

from typing import Optional, TypedDict

from factcheck.schemas.agent import ActionRecord, Perception, Reasoning


class AgentState(TypedDict, total=False):
    """State that flows through the Perceive → Reason → Act graph.

    Every node reads from and writes to it. ``error`` is set by the node
    that failed; the graph then routes straight to END.
    """
    # Input
    claim: str

    # Phase outputs
    perception: Optional[Perception]
    reasoning: Optional[Reasoning]
    action: Optional[ActionRecord]

    # Control flow
    error: Optional[str]
    failed_phase: Optional[str]
