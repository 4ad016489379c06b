"""Claim check endpoint.

Runs one agent tick per request and returns the AgentResult as JSON. A
failed run is still a 200 with ``status: "failed"``: the request was
handled, the claim just could not be checked.
"""

from fastapi import APIRouter, Depends, Request

from factcheck.agent.orchestrator import FactCheckAgent
from factcheck.config import Settings
from factcheck.schemas import CheckRequest
from factcheck.utils.logging import log, get_logger

MODULE = "checks"
logger = get_logger()

router = APIRouter()


def get_agent(request: Request) -> FactCheckAgent:
    """The app-wide agent, built from the environment on first use."""
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        agent = FactCheckAgent(Settings.from_env())
        request.app.state.agent = agent
    return agent


@router.post("")
async def check_claim(body: CheckRequest, agent: FactCheckAgent = Depends(get_agent)) -> dict:
    log.info(logger, MODULE, "check_start", "Checking claim", claim=body.claim)
    result = await agent.agent_tick(body.claim)
    log.info(logger, MODULE, "check_done", "Claim checked",
             status=result.status, latency_ms=result.execution_time_ms)
    return result.model_dump(mode="json")
