"""Executor: run the search plan.

  needs_breakdown == False → one search over the claim
  needs_breakdown == True  → every sub-query searched concurrently, results
                             re-associated with their query index, merged

If any sub-search fails, the whole fan-out is abandoned and the claim is
searched once, undecomposed. That fallback is the only recovery: if the
fallback search fails too, its error propagates to the caller.
"""

import asyncio
import time
from typing import Optional, Protocol, Union

from factcheck.agent.merger import merge_results
from factcheck.schemas.agent import DecomposedSearchResult, SingleSearchResult
from factcheck.schemas.llm_outputs import DecompositionPlan
from factcheck.schemas.search import SearchResultBundle
from factcheck.utils.events import EventSink, LoggingEventSink
from factcheck.utils.logging import log, get_logger

MODULE = "executor"
logger = get_logger()


class SearchClient(Protocol):
    async def search(self, query: str) -> SearchResultBundle:
        ...


class FanOutError(Exception):
    """One or more sub-searches failed.

    ``failures`` maps query index to the exception that query raised.
    """

    def __init__(self, failures: dict[int, BaseException]):
        first = failures[min(failures)]
        super().__init__(
            f"{len(failures)} sub-search(es) failed; first: {type(first).__name__}: {first}"
        )
        self.failures = failures


class Executor:
    def __init__(self, search_client: SearchClient, events: Optional[EventSink] = None):
        self.search_client = search_client
        self.events = events or LoggingEventSink()

    async def execute(
        self, claim: str, plan: DecompositionPlan,
    ) -> Union[SingleSearchResult, DecomposedSearchResult]:
        """Execute ``plan`` for ``claim``."""
        if not plan.needs_breakdown:
            log.info(logger, MODULE, "single_start", "Executing single search strategy",
                     claim=claim)
            self.events.emit("strategy_chosen", strategy="single")
            return await self._single(claim)

        log.info(logger, MODULE, "fanout_start", "Executing parallel search strategy",
                 query_count=len(plan.sub_queries))
        try:
            per_query = await self._fan_out(plan.sub_queries)
            merged = merge_results(per_query)
        except Exception as e:
            log.warning(logger, MODULE, "fanout_fallback",
                        "Parallel search execution failed, falling back to single search",
                        error=str(e), error_type=type(e).__name__)
            self.events.emit("fallback_triggered", component=MODULE, reason=str(e))
            self.events.emit("strategy_chosen", strategy="single")
            return await self._single(claim)

        log.info(logger, MODULE, "fanout_done", "All sub-searches completed",
                 query_count=len(per_query), merged_organic=len(merged.organic))
        self.events.emit("strategy_chosen", strategy="decomposed")
        return DecomposedSearchResult(
            sub_queries=list(plan.sub_queries),
            reasoning=plan.reasoning,
            merged=merged,
            per_query=per_query,
        )

    async def _single(self, query: str) -> SingleSearchResult:
        bundle = await self._search(query)
        return SingleSearchResult(query=query, bundle=bundle)

    async def _search(self, query: str) -> SearchResultBundle:
        t0 = time.monotonic()
        bundle = await self.search_client.search(query)
        self.events.emit("search_completed", query=query,
                         organic_count=len(bundle.organic),
                         latency_ms=int((time.monotonic() - t0) * 1000))
        return bundle

    async def _indexed_search(self, index: int, query: str) -> tuple[int, SearchResultBundle]:
        log.info(logger, MODULE, "sub_search_start", f"Sub-search {index + 1}",
                 query=query, index=index)
        return index, await self._search(query)

    async def _fan_out(self, queries: list[str]) -> list[SearchResultBundle]:
        """Search every query concurrently; bundles come back in query order.

        All searches run to completion or failure before anything is
        decided, so no task is left running behind a raised error.
        """
        tasks = [
            asyncio.ensure_future(self._indexed_search(index, query))
            for index, query in enumerate(queries)
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        failures: dict[int, BaseException] = {}
        by_index: dict[int, SearchResultBundle] = {}
        for task_index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                failures[task_index] = outcome
                log.warning(logger, MODULE, "sub_search_failed", "Sub-search failed",
                            query=queries[task_index], index=task_index,
                            error=str(outcome), error_type=type(outcome).__name__)
                continue
            index, bundle = outcome
            by_index[index] = bundle

        if failures:
            raise FanOutError(failures)
        return [by_index[i] for i in range(len(queries))]
