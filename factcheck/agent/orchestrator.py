"""Orchestrator: one agent tick over one claim.

Runs the Perceive → Reason → Act graph, times it, and packages the
outcome as AgentSuccess or AgentFailure. agent_tick() never raises: every
failure, including ones the graph did not anticipate, ends up in the
failure envelope with the claim, the elapsed time and an error string.
"""

import time
from typing import Optional, TextIO, Union

from factcheck.agent.actor import Reporter
from factcheck.agent.executor import Executor, SearchClient
from factcheck.agent.graph import build_agent_graph
from factcheck.agent.planner import Planner
from factcheck.agent.reasoner import Reasoner
from factcheck.config import Settings
from factcheck.schemas.agent import AgentFailure, AgentSuccess, Phases, Summary
from factcheck.tools.brightdata import BrightDataSearchClient
from factcheck.utils.events import EventSink, LoggingEventSink
from factcheck.utils.logging import log, get_logger

MODULE = "agent"
logger = get_logger()


def _elapsed_ms(t0: float) -> int:
    return max(0, int((time.monotonic() - t0) * 1000))


class FactCheckAgent:
    """Wires the components together once; agent_tick() can run many claims.

    Every collaborator can be replaced. Anything not passed is built from
    ``settings``: the Bright Data search client, the OpenAI-backed planner
    and reasoner, and a reporter writing to ``stream`` (stdout by default).
    """

    def __init__(
        self,
        settings: Settings,
        *,
        search_client: Optional[SearchClient] = None,
        planner: Optional[Planner] = None,
        reasoner: Optional[Reasoner] = None,
        reporter: Optional[Reporter] = None,
        events: Optional[EventSink] = None,
        stream: Optional[TextIO] = None,
    ):
        self.settings = settings
        self.events = events or LoggingEventSink()
        self.planner = planner or Planner(settings, events=self.events)
        self.executor = Executor(
            search_client or BrightDataSearchClient(settings),
            events=self.events,
        )
        self.reasoner = reasoner or Reasoner(settings, events=self.events)
        self.reporter = reporter or Reporter(stream)
        self.graph = build_agent_graph(
            self.planner, self.executor, self.reasoner, self.reporter, self.events,
        )

    async def agent_tick(self, claim: str) -> Union[AgentSuccess, AgentFailure]:
        """Run one Perceive → Reason → Act cycle for ``claim``."""
        log.info(logger, MODULE, "tick_start", "Starting PRA cycle", claim=claim)
        t0 = time.monotonic()

        try:
            if not claim or not claim.strip():
                raise ValueError("Claim must not be empty")
            final = await self.graph.ainvoke({"claim": claim})
        except Exception as e:
            return self._failure(claim, t0, f"{type(e).__name__}: {e}")

        if final.get("error"):
            return self._failure(claim, t0, final["error"])

        perception = final["perception"]
        reasoning = final["reasoning"]
        action = final["action"]
        elapsed = _elapsed_ms(t0)

        log.info(logger, MODULE, "tick_done", "Agent tick complete",
                 latency_ms=elapsed, verdict=reasoning.verdict,
                 confidence=reasoning.confidence, strategy=perception.strategy)
        self.events.emit("run_completed", execution_time_ms=elapsed,
                         verdict=reasoning.verdict, strategy=perception.strategy)

        return AgentSuccess(
            claim=claim,
            execution_time_ms=elapsed,
            phases=Phases(perception=perception, reasoning=reasoning, action=action),
            summary=Summary(
                verdict=reasoning.verdict,
                confidence=reasoning.confidence,
                sources_analyzed=perception.metadata.organic_results_count,
                strategy=perception.strategy,
            ),
        )

    def _failure(self, claim: str, t0: float, error: str) -> AgentFailure:
        elapsed = _elapsed_ms(t0)
        log.error(logger, MODULE, "tick_failed", "Agent tick failed",
                  error=error, latency_ms=elapsed)
        self.events.emit("run_failed", execution_time_ms=elapsed, error=error)
        return AgentFailure(claim=claim, execution_time_ms=elapsed, error=error)


async def agent_tick(
    claim: str, settings: Optional[Settings] = None,
) -> Union[AgentSuccess, AgentFailure]:
    """Check one claim with components built from ``settings`` (or the environment).

    Never raises: a configuration error becomes an AgentFailure too.
    """
    try:
        agent = FactCheckAgent(settings or Settings.from_env())
    except Exception as e:
        error = f"Configuration failure: {type(e).__name__}: {e}"
        log.error(logger, MODULE, "setup_failed", "Could not build the agent",
                  error=error, error_type=type(e).__name__)
        return AgentFailure(claim=claim, execution_time_ms=0, error=error)
    return await agent.agent_tick(claim)
