"""Unified LLM invocation with parsing, validation, and retry.

Every model call in the pipeline goes through invoke_llm():

  1. INVOKE: Call the chat model with system/user messages
  2. PARSE: Extract JSON from the raw response
  3. VALIDATE: Check against the Pydantic schema
  4. SEMANTIC: Optional domain check on the validated model
  5. RETRY: On any failure, try again (up to max_retries)

Callers get either a validated model instance or an LLMInvocationError
carrying the last raw output and the last error of each kind. What to do
with that error (fallback plan, fallback verdict) is the caller's call.
"""

import asyncio
import time
from typing import Any, Callable, Optional, Type, TypeVar

from langchain_core.messages import SystemMessage, HumanMessage
from pydantic import BaseModel, ValidationError

from factcheck.llm.parser import extract_json, JSONExtractionError
from factcheck.utils.logging import log, get_logger

MODULE = "llm.invoker"
logger = get_logger()

T = TypeVar("T", bound=BaseModel)


class LLMInvocationError(Exception):
    """Raised when LLM invocation fails after all retries."""

    def __init__(
        self,
        message: str,
        raw_output: Optional[str] = None,
        parse_error: Optional[str] = None,
        validation_error: Optional[str] = None,
        call_error: Optional[str] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.raw_output = raw_output
        self.parse_error = parse_error
        self.validation_error = validation_error
        self.call_error = call_error
        self.attempts = attempts

    @property
    def cause(self) -> str:
        """The most specific reason the last attempt failed."""
        return (
            self.validation_error
            or self.parse_error
            or self.call_error
            or str(self)
        )


def _content_text(content: Any) -> str:
    """Chat models return either a string or a list of content blocks."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def invoke_llm(
    llm,
    system_prompt: str,
    user_prompt: str,
    schema: Type[T],
    *,
    max_retries: int = 2,
    retry_delay: float = 1.0,
    semantic_validator: Optional[Callable[[T], tuple[bool, str]]] = None,
    activity_name: str = "invoke",
) -> T:
    """Invoke a chat model and return validated, typed output.

    Args:
        llm: Any LangChain chat model (anything with an async ``ainvoke``).
        system_prompt: System message content
        user_prompt: User message content
        schema: Pydantic model class to validate against
        max_retries: Number of retry attempts after the first (default: 2)
        retry_delay: Seconds to wait before retrying after a call error
        semantic_validator: Optional function (model) -> (is_valid, error_msg)
        activity_name: Name for logging context

    Returns:
        Validated instance of the schema type

    Raises:
        LLMInvocationError: If all attempts fail
    """
    last_raw: Optional[str] = None
    last_parse_error: Optional[str] = None
    last_validation_error: Optional[str] = None
    last_call_error: Optional[str] = None

    for attempt in range(max_retries + 1):
        # Step 1: INVOKE
        _t0 = time.monotonic()
        try:
            response = await llm.ainvoke([
                SystemMessage(content=system_prompt),
                HumanMessage(content=user_prompt),
            ])
        except Exception as e:
            last_call_error = f"{type(e).__name__}: {e}"
            log.error(logger, MODULE, "invoke_error",
                      f"LLM invocation error for {activity_name}",
                      error=str(e), error_type=type(e).__name__,
                      attempt=attempt + 1)
            if attempt < max_retries and retry_delay > 0:
                await asyncio.sleep(retry_delay)
            continue

        latency_ms = int((time.monotonic() - _t0) * 1000)
        raw = _content_text(response.content).strip()
        last_raw = raw

        log.debug(logger, MODULE, "llm_response",
                  f"LLM call complete for {activity_name}",
                  attempt=attempt + 1, latency_ms=latency_ms,
                  raw_length=len(raw))

        # Step 2: PARSE
        try:
            parsed = extract_json(raw)
        except JSONExtractionError as e:
            last_parse_error = str(e)
            log.warning(logger, MODULE, "parse_failed",
                        f"JSON extraction failed for {activity_name}",
                        attempt=attempt + 1, error=str(e))
            continue

        # Step 3: VALIDATE (schema)
        try:
            validated = schema.model_validate(parsed)
        except ValidationError as e:
            last_validation_error = str(e)
            log.warning(logger, MODULE, "validation_failed",
                        f"Schema validation failed for {activity_name}",
                        attempt=attempt + 1, error=str(e),
                        schema=schema.__name__)
            continue

        # Step 4: VALIDATE (semantic)
        if semantic_validator:
            is_valid, semantic_error = semantic_validator(validated)
            if not is_valid:
                last_validation_error = f"Semantic: {semantic_error}"
                log.warning(logger, MODULE, "semantic_failed",
                            f"Semantic validation failed for {activity_name}",
                            attempt=attempt + 1, error=semantic_error)
                continue

        log.info(logger, MODULE, "invoke_success",
                 f"LLM invocation successful for {activity_name}",
                 attempts=attempt + 1, latency_ms=latency_ms,
                 schema=schema.__name__)
        return validated

    raise LLMInvocationError(
        f"LLM invocation failed for {activity_name} after {max_retries + 1} attempts",
        raw_output=last_raw,
        parse_error=last_parse_error,
        validation_error=last_validation_error,
        call_error=last_call_error,
        attempts=max_retries + 1,
    )
