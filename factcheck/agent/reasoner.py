"""Reasoner: render a verdict from the perception's evidence.

Two failure policies, kept deliberately apart:
  - no OPENAI_API_KEY → MissingCredentialError propagates; without a
    reasoning model there is no usable output at all
  - the model call fails in any other way → a fallback Reasoning with
    verdict Unverifiable, confidence 0 and model_id "error-fallback"
"""

import json
from typing import Callable, Optional

from factcheck.config import Settings
from factcheck.llm import (
    get_reasoning_llm,
    invoke_llm,
    validate_verdict,
    LLMInvocationError,
    MissingCredentialError,
)
from factcheck.prompts.verification import REASON_SYSTEM, REASON_USER
from factcheck.schemas.agent import FALLBACK_MODEL_ID, Perception, Reasoning
from factcheck.schemas.llm_outputs import VerdictOutput
from factcheck.utils.events import EventSink, LoggingEventSink
from factcheck.utils.logging import log, get_logger

MODULE = "reasoner"
logger = get_logger()


def serialize_evidence(perception: Perception) -> str:
    """The cleaned evidence as indented JSON, nulls omitted."""
    return json.dumps(
        perception.evidence.model_dump(mode="json", exclude_none=True),
        indent=2,
        ensure_ascii=False,
    )


class Reasoner:
    """Ask the reasoning model for a verdict.

    Args:
        settings: Runtime settings (credential, model name).
        llm_factory: Builds the chat model. Defaults to get_reasoning_llm.
        events: Where fallbacks are reported.
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
        self.llm_factory = llm_factory or get_reasoning_llm
        self.events = events or LoggingEventSink()
        self.retry_delay = retry_delay

    async def reason(self, claim: str, perception: Perception) -> Reasoning:
        """Return a Reasoning for ``claim``.

        Raises:
            MissingCredentialError: If OPENAI_API_KEY is not configured.
        """
        if not self.settings.has_openai_credentials:
            log.error(logger, MODULE, "reason_failed", "Reasoning requires an OpenAI API key",
                      error_type="MissingCredentialError")
            raise MissingCredentialError("OPENAI_API_KEY environment variable is not set")

        sources = perception.metadata.organic_results_count
        log.info(logger, MODULE, "reason_start", "Invoking AI reasoning",
                 claim=claim, sources=sources, model=self.settings.reasoner_model)

        try:
            llm = self.llm_factory(self.settings)
            output = await invoke_llm(
                llm,
                system_prompt=REASON_SYSTEM,
                user_prompt=REASON_USER.format(
                    claim=claim, evidence_json=serialize_evidence(perception),
                ),
                schema=VerdictOutput,
                semantic_validator=validate_verdict,
                max_retries=self.settings.llm_max_retries,
                retry_delay=self.retry_delay,
                activity_name="reason",
            )
        except LLMInvocationError as e:
            return self._fallback(claim, sources, e.cause)
        except Exception as e:
            return self._fallback(claim, sources, f"{type(e).__name__}: {e}")

        reasoning = Reasoning(
            claim=claim,
            verdict=output.verdict,
            explanation=output.explanation,
            confidence=output.confidence,
            sources_analyzed=sources,
            model_id=self.settings.reasoner_model,
        )
        log.info(logger, MODULE, "reason_done", "Reasoning complete",
                 verdict=reasoning.verdict, confidence=reasoning.confidence)
        return reasoning

    def _fallback(self, claim: str, sources: int, cause: str) -> Reasoning:
        log.error(logger, MODULE, "reason_fallback", "Reasoning phase failed, returning Unverifiable",
                  error=cause)
        self.events.emit("fallback_triggered", component=MODULE, reason=cause)
        return Reasoning(
            claim=claim,
            verdict="Unverifiable",
            explanation=f"AI reasoning failed: {cause}",
            confidence=0,
            sources_analyzed=sources,
            model_id=FALLBACK_MODEL_ID,
        )
