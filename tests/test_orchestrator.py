"""End-to-end tests for one agent tick, with scripted model and search fakes."""

import pytest
from conftest import FakeSearchClient, make_bundle

from factcheck.agent.orchestrator import agent_tick
from factcheck.schemas.agent import AgentFailure, AgentSuccess
from factcheck.tools.brightdata import SearchTransportError

VACCINES = "Vaccines cause autism and are unsafe for children"
EIFFEL = "The Eiffel Tower is in Paris"

PLAN_VACCINES = {
    "needs_breakdown": True,
    "sub_queries": ["vaccines autism link studies", "childhood vaccine safety evidence"],
    "reasoning": "The claim makes two separate assertions.",
}

VERDICT_TRUE = {
    "verdict": "True",
    "explanation": "Every result places the Eiffel Tower on the Champ de Mars in Paris.",
    "confidence": 99,
}


def vaccines_client():
    shared = ("https://www.cdc.gov/vaccinesafety/concerns/autism.html",)
    return FakeSearchClient({
        PLAN_VACCINES["sub_queries"][0]: make_bundle("autism", 8, shared=shared),
        PLAN_VACCINES["sub_queries"][1]: make_bundle("safety", 8, shared=shared),
    })


@pytest.mark.asyncio
async def test_compound_claim_decomposed(make_agent):
    client = vaccines_client()
    agent, planner_llm, reasoner_llm, stream = make_agent(client, plan_response=PLAN_VACCINES)

    result = await agent.agent_tick(VACCINES)

    assert isinstance(result, AgentSuccess)
    assert result.status == "success"
    assert result.claim == VACCINES
    assert result.execution_time_ms >= 0

    perception = result.phases.perception
    assert perception.strategy == "decomposed"
    assert perception.sub_queries == PLAN_VACCINES["sub_queries"]
    assert len(perception.evidence.organic) == 15
    assert perception.metadata.organic_results_count == 15
    assert perception.metadata.used_plan_decomposition is True

    assert sorted(client.calls) == sorted(PLAN_VACCINES["sub_queries"])
    assert len(planner_llm.calls) == 1
    assert len(reasoner_llm.calls) == 1

    assert result.summary.verdict == "False"
    assert result.summary.sources_analyzed == 15
    assert result.summary.strategy == "decomposed"
    assert 0 <= result.summary.confidence <= 100
    assert result.phases.reasoning.sources_analyzed == 15
    assert result.phases.action.actions_taken == ["display_results"]
    assert "Search Strategy: decomposed" in stream.getvalue()


@pytest.mark.asyncio
async def test_simple_claim_single_search(make_agent):
    client = FakeSearchClient({EIFFEL: make_bundle("eiffel", 6)})
    agent, _, _, _ = make_agent(client, verdict_response=VERDICT_TRUE)

    result = await agent.agent_tick(EIFFEL)

    assert isinstance(result, AgentSuccess)
    assert client.calls == [EIFFEL]
    assert result.phases.perception.strategy == "single"
    assert result.phases.perception.sub_queries is None
    assert result.summary.verdict == "True"
    assert result.summary.sources_analyzed == 6


@pytest.mark.asyncio
async def test_events_in_pipeline_order(make_agent, events):
    agent, _, _, _ = make_agent(vaccines_client(), plan_response=PLAN_VACCINES)

    await agent.agent_tick(VACCINES)

    names = events.names()
    assert names[0] == "phase_started"
    assert names[-1] == "run_completed"
    order = [names.index(n) for n in ("plan_decided", "strategy_chosen", "run_completed")]
    assert order == sorted(order)
    phases = [(e.name, e.fields["phase"]) for e in events.events if e.name.startswith("phase_")]
    assert phases == [
        ("phase_started", "perceive"), ("phase_completed", "perceive"),
        ("phase_started", "reason"), ("phase_completed", "reason"),
        ("phase_started", "act"), ("phase_completed", "act"),
    ]


@pytest.mark.asyncio
async def test_planner_failure_still_produces_verdict(make_agent):
    client = FakeSearchClient({VACCINES: make_bundle("claim", 5)})
    agent, _, _, _ = make_agent(client, plan_response=ConnectionError("planner unreachable"))

    result = await agent.agent_tick(VACCINES)

    assert isinstance(result, AgentSuccess)
    assert client.calls == [VACCINES]
    assert result.summary.strategy == "single"


@pytest.mark.asyncio
async def test_sub_search_failure_falls_back(make_agent, events):
    client = FakeSearchClient({
        PLAN_VACCINES["sub_queries"][0]: make_bundle("autism", 8),
        PLAN_VACCINES["sub_queries"][1]: SearchTransportError("proxy reset"),
        VACCINES: make_bundle("claim", 4),
    })
    agent, _, _, _ = make_agent(client, plan_response=PLAN_VACCINES)

    result = await agent.agent_tick(VACCINES)

    assert isinstance(result, AgentSuccess)
    assert client.calls.count(VACCINES) == 1
    assert result.summary.strategy == "single"
    assert result.summary.sources_analyzed == 4
    assert [e.fields["component"] for e in events.of("fallback_triggered")] == ["executor"]


@pytest.mark.asyncio
async def test_search_failure_is_agent_failure(make_agent, events):
    client = FakeSearchClient({EIFFEL: SearchTransportError("proxy unreachable")})
    agent, _, reasoner_llm, stream = make_agent(client)

    result = await agent.agent_tick(EIFFEL)

    assert isinstance(result, AgentFailure)
    assert result.status == "failed"
    assert result.claim == EIFFEL
    assert result.error.startswith("Perception failure: ")
    assert "proxy unreachable" in result.error
    assert reasoner_llm.calls == []
    assert stream.getvalue() == ""
    assert events.names()[-1] == "run_failed"


@pytest.mark.asyncio
async def test_reasoning_failure_is_unverifiable_success(make_agent):
    client = FakeSearchClient({EIFFEL: make_bundle("eiffel", 3)})
    agent, _, _, _ = make_agent(client, verdict_response="no json here")

    result = await agent.agent_tick(EIFFEL)

    assert isinstance(result, AgentSuccess)
    assert result.summary.verdict == "Unverifiable"
    assert result.summary.confidence == 0
    assert result.phases.reasoning.model_id == "error-fallback"


@pytest.mark.asyncio
async def test_missing_key_is_agent_failure(make_agent, no_key_settings):
    client = FakeSearchClient({EIFFEL: make_bundle("eiffel", 3)})
    agent, planner_llm, reasoner_llm, _ = make_agent(client, agent_settings=no_key_settings)

    result = await agent.agent_tick(EIFFEL)

    assert isinstance(result, AgentFailure)
    assert "OPENAI_API_KEY" in result.error
    # Planning is skipped, search still runs, reasoning refuses
    assert planner_llm.calls == []
    assert client.calls == [EIFFEL]
    assert reasoner_llm.calls == []


@pytest.mark.asyncio
async def test_report_failure_does_not_fail_run(make_agent):
    client = FakeSearchClient({EIFFEL: make_bundle("eiffel", 3)})
    agent, _, _, stream = make_agent(client, verdict_response=VERDICT_TRUE)
    stream.close()

    result = await agent.agent_tick(EIFFEL)

    assert isinstance(result, AgentSuccess)
    assert result.phases.action.status == "failed"
    assert result.phases.action.actions_taken == []
    assert result.summary.verdict == "True"


@pytest.mark.asyncio
@pytest.mark.parametrize("claim", ["", "   "])
async def test_empty_claim_is_agent_failure(make_agent, claim):
    client = FakeSearchClient({})
    agent, planner_llm, _, _ = make_agent(client)

    result = await agent.agent_tick(claim)

    assert isinstance(result, AgentFailure)
    assert "empty" in result.error
    assert client.calls == []
    assert planner_llm.calls == []


@pytest.mark.asyncio
async def test_agent_reusable_across_claims(make_agent):
    client = FakeSearchClient({
        EIFFEL: make_bundle("eiffel", 2),
        VACCINES: make_bundle("claim", 3),
    })
    agent, _, _, _ = make_agent(client)

    first = await agent.agent_tick(EIFFEL)
    second = await agent.agent_tick(VACCINES)

    assert first.summary.sources_analyzed == 2
    assert second.summary.sources_analyzed == 3


@pytest.mark.asyncio
async def test_bad_environment_is_agent_failure(monkeypatch):
    monkeypatch.setenv("FACTCHECK_LLM_MAX_RETRIES", "")

    result = await agent_tick(EIFFEL)

    assert isinstance(result, AgentFailure)
    assert result.claim == EIFFEL
    assert result.error.startswith("Configuration failure: ValueError")
