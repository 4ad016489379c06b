"""LangGraph Perceive → Reason → Act graph.

    perceive ──▶ reason ──▶ act ──▶ END
        │           │
        └───────────┴──▶ END   (error set: the run failed)

perceive  — Planner → Executor → ResultMerger → PerceptionBuilder
reason    — Reasoner (falls back on its own; only a missing credential fails)
act       — Reporter (absorbs its own failures)
"""

from langgraph.graph import StateGraph, END

from factcheck.agent.actor import Reporter
from factcheck.agent.executor import Executor
from factcheck.agent.perception import perception_from_execution
from factcheck.agent.planner import Planner
from factcheck.agent.reasoner import Reasoner
from factcheck.agent.state import AgentState
from factcheck.llm import MissingCredentialError
from factcheck.utils.events import EventSink
from factcheck.utils.logging import log, get_logger

MODULE = "graph"
logger = get_logger()


def _route(next_node: str):
    """Conditional edge: continue to ``next_node`` unless the phase failed."""
    def route(state: AgentState) -> str:
        return "failed" if state.get("error") else next_node
    return route


def build_agent_graph(
    planner: Planner,
    executor: Executor,
    reasoner: Reasoner,
    reporter: Reporter,
    events: EventSink,
):
    """Build and compile the PRA state machine around the given components."""

    async def perceive(state: AgentState) -> dict:
        claim = state["claim"]
        events.emit("phase_started", phase="perceive")
        try:
            plan = await planner.plan(claim)
            result = await executor.execute(claim, plan)
            perception = perception_from_execution(claim, result)
        except Exception as e:
            log.error(logger, MODULE, "perceive_failed", "Perception phase failed",
                      error=str(e), error_type=type(e).__name__)
            events.emit("phase_failed", phase="perceive", error=str(e))
            return {"error": f"Perception failure: {e}", "failed_phase": "perceive"}

        log.info(logger, MODULE, "perceive_done", "Perception complete",
                 strategy=perception.strategy,
                 sources=perception.metadata.organic_results_count)
        events.emit("phase_completed", phase="perceive",
                    strategy=perception.strategy,
                    organic_count=perception.metadata.organic_results_count)
        return {"perception": perception}

    async def reason(state: AgentState) -> dict:
        events.emit("phase_started", phase="reason")
        try:
            reasoning = await reasoner.reason(state["claim"], state["perception"])
        except MissingCredentialError as e:
            events.emit("phase_failed", phase="reason", error=str(e))
            return {"error": str(e), "failed_phase": "reason"}

        events.emit("phase_completed", phase="reason",
                    verdict=reasoning.verdict, confidence=reasoning.confidence,
                    fallback=reasoning.is_fallback)
        return {"reasoning": reasoning}

    async def act(state: AgentState) -> dict:
        events.emit("phase_started", phase="act")
        action = reporter.act(state["claim"], state["perception"], state["reasoning"])
        events.emit("phase_completed", phase="act", status=action.status)
        return {"action": action}

    graph = StateGraph(AgentState)

    graph.add_node("perceive", perceive)
    graph.add_node("reason", reason)
    graph.add_node("act", act)

    graph.set_entry_point("perceive")
    graph.add_conditional_edges("perceive", _route("reason"), {"reason": "reason", "failed": END})
    graph.add_conditional_edges("reason", _route("act"), {"act": "act", "failed": END})
    graph.add_edge("act", END)

    return graph.compile()
