"""Shared fixtures and fakes for the factcheck tests.

Nothing here touches the network: the chat model and the search client
are scripted fakes, and the Bright Data client is exercised through
httpx.MockTransport in its own module.
"""

import asyncio
import io
import json
from typing import Optional, Union

import pytest
from langchain_core.messages import AIMessage

from factcheck.agent.actor import Reporter
from factcheck.agent.orchestrator import FactCheckAgent
from factcheck.agent.planner import Planner
from factcheck.agent.reasoner import Reasoner
from factcheck.config import Settings
from factcheck.schemas.search import (
    Answer,
    KnowledgePanel,
    OrganicResult,
    RelatedQuestion,
    SearchResultBundle,
)
from factcheck.utils.events import RecordingEventSink


class FakeChatModel:
    """Scripted chat model.

    Each ainvoke() consumes the next scripted response; the last one
    repeats. A response may be a dict (sent as JSON), a string (sent
    verbatim) or an exception (raised).
    """

    def __init__(self, *responses: Union[dict, str, BaseException]):
        self.responses = list(responses)
        self.calls: list = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, dict):
            item = json.dumps(item)
        return AIMessage(content=item)


class FakeSearchClient:
    """Search client returning canned bundles per query.

    ``delays`` lets a test make some queries finish later than others.
    """

    def __init__(
        self,
        results: dict[str, Union[SearchResultBundle, BaseException]],
        delays: Optional[dict[str, float]] = None,
    ):
        self.results = results
        self.delays = delays or {}
        self.calls: list[str] = []
        self.completed: list[str] = []

    async def search(self, query: str) -> SearchResultBundle:
        self.calls.append(query)
        if query in self.delays:
            await asyncio.sleep(self.delays[query])
        outcome = self.results[query]
        if isinstance(outcome, BaseException):
            raise outcome
        self.completed.append(query)
        return outcome


def make_organic(prefix: str, count: int, shared: tuple[str, ...] = ()) -> list[OrganicResult]:
    """``count`` organic items; links in ``shared`` come first."""
    items = [
        OrganicResult(title=f"Shared {link}", description="shared", link=link,
                      display_link="shared.example", rank=i + 1)
        for i, link in enumerate(shared)
    ]
    for i in range(len(shared), count):
        items.append(OrganicResult(
            title=f"{prefix} result {i}",
            description=f"{prefix} snippet {i}",
            link=f"https://{prefix}.example/{i}",
            display_link=f"{prefix}.example",
            rank=i + 1,
        ))
    return items


def make_bundle(
    prefix: str = "site",
    count: int = 3,
    shared: tuple[str, ...] = (),
    knowledge: Optional[KnowledgePanel] = None,
    questions: tuple[str, ...] = (),
) -> SearchResultBundle:
    return SearchResultBundle(
        organic=make_organic(prefix, count, shared),
        knowledge=knowledge,
        people_also_ask=[
            RelatedQuestion(question=q, answers=[Answer(text=f"answer to {q}")])
            for q in questions
        ],
    )


PLAN_SINGLE = {
    "needs_breakdown": False,
    "sub_queries": [],
    "reasoning": "One assertion.",
}

VERDICT_FALSE = {
    "verdict": "False",
    "explanation": "Multiple large studies in the results find no link between vaccines and autism.",
    "confidence": 92,
}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="sk-test",
        llm_max_retries=0,
        bright_data_customer_id="c_123",
        bright_data_zone="serp_zone",
        bright_data_password="secret",
    )


@pytest.fixture
def no_key_settings(settings) -> Settings:
    return settings.model_copy(update={"openai_api_key": None})


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def make_agent(settings, events):
    """Build a FactCheckAgent around fakes.

    Returns (agent, planner_llm, reasoner_llm, output_stream).
    """

    def _make(
        search_client,
        plan_response=PLAN_SINGLE,
        verdict_response=VERDICT_FALSE,
        agent_settings: Optional[Settings] = None,
    ):
        cfg = agent_settings or settings
        planner_llm = FakeChatModel(plan_response)
        reasoner_llm = FakeChatModel(verdict_response)
        stream = io.StringIO()
        agent = FactCheckAgent(
            cfg,
            search_client=search_client,
            planner=Planner(cfg, llm_factory=lambda _: planner_llm, events=events, retry_delay=0),
            reasoner=Reasoner(cfg, llm_factory=lambda _: reasoner_llm, events=events, retry_delay=0),
            reporter=Reporter(stream),
            events=events,
        )
        return agent, planner_llm, reasoner_llm, stream

    return _make
