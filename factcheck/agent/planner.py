"""Planner: decide whether a claim needs several focused searches.

The decision and the sub-queries are the model's; the planner adds no
heuristics of its own. What it does add is the guarantee that planning
never blocks the pipeline: any failure (no API key, bad JSON, schema
violation, network error) degrades to a single search over the claim.
"""

from typing import Callable, Optional

from factcheck.config import Settings
from factcheck.llm import (
    get_planning_llm,
    invoke_llm,
    validate_plan,
    LLMInvocationError,
    MissingCredentialError,
)
from factcheck.prompts.verification import PLAN_SYSTEM, PLAN_USER
from factcheck.schemas.llm_outputs import DecompositionPlan
from factcheck.utils.events import EventSink, LoggingEventSink
from factcheck.utils.logging import log, get_logger

MODULE = "planner"
logger = get_logger()


class Planner:
    """Ask the planning model whether to decompose a claim.

    Args:
        settings: Runtime settings; the credential check happens per call.
        llm_factory: Builds the chat model. Defaults to get_planning_llm;
            tests pass a factory returning a scripted fake.
        events: Where plan decisions and fallbacks are reported.
        retry_delay: Seconds between invocation retries.
    """

    def __init__(
        self,
        settings: Settings,
        llm_factory: Optional[Callable[[Settings], object]] = None,
        events: Optional[EventSink] = None,
        retry_delay: float = 1.0,
    ):
        self.settings = settings
        self.llm_factory = llm_factory or get_planning_llm
        self.events = events or LoggingEventSink()
        self.retry_delay = retry_delay

    async def plan(self, claim: str) -> DecompositionPlan:
        """Return a decomposition plan for ``claim``. Never raises."""
        if not self.settings.has_openai_credentials:
            log.warning(logger, MODULE, "plan_skipped",
                        "OpenAI API key not found, using single search approach")
            return self._fallback("OPENAI_API_KEY is not set; planning skipped")

        log.info(logger, MODULE, "plan_start", "Analyzing claim complexity", claim=claim)

        try:
            llm = self.llm_factory(self.settings)
            plan = await invoke_llm(
                llm,
                system_prompt=PLAN_SYSTEM,
                user_prompt=PLAN_USER.format(claim=claim),
                schema=DecompositionPlan,
                semantic_validator=validate_plan,
                max_retries=self.settings.llm_max_retries,
                retry_delay=self.retry_delay,
                activity_name="plan",
            )
        except LLMInvocationError as e:
            log.error(logger, MODULE, "plan_failed", "Plan decomposition failed",
                      error=e.cause, error_type=type(e).__name__, attempts=e.attempts)
            return self._fallback(f"Decomposition failed: {e.cause}")
        except MissingCredentialError as e:
            log.warning(logger, MODULE, "plan_skipped", "Planning client unavailable",
                        error=str(e))
            return self._fallback(f"Decomposition failed: {e}")
        except Exception as e:
            log.error(logger, MODULE, "plan_failed", "Plan decomposition failed",
                      error=str(e), error_type=type(e).__name__)
            return self._fallback(f"Decomposition failed: {e}")

        log.info(logger, MODULE, "plan_done",
                 "Plan decision: " + ("DECOMPOSE" if plan.needs_breakdown else "SINGLE SEARCH"),
                 needs_breakdown=plan.needs_breakdown,
                 sub_queries=plan.sub_queries or None)
        self.events.emit("plan_decided",
                         needs_breakdown=plan.needs_breakdown,
                         sub_query_count=len(plan.sub_queries))
        return plan

    def _fallback(self, reason: str) -> DecompositionPlan:
        self.events.emit("fallback_triggered", component=MODULE, reason=reason)
        self.events.emit("plan_decided", needs_breakdown=False, sub_query_count=0)
        return DecompositionPlan.single(reason)
