"""LLM invocation package.

This package provides a unified interface for all LLM calls:

  from factcheck.llm import invoke_llm, get_planning_llm

  llm = get_planning_llm(settings)
  plan = await invoke_llm(
      llm,
      system_prompt=PLAN_SYSTEM,
      user_prompt=PLAN_USER.format(claim=claim),
      schema=DecompositionPlan,
      semantic_validator=validate_plan,
  )

Architecture:
  client.py     → ChatOpenAI clients built from Settings
  parser.py     → JSON extraction from raw LLM output
  validators.py → Semantic validation beyond schema checks
  invoker.py    → Unified invoke-parse-validate-retry logic
"""

from factcheck.llm.client import (
    get_planning_llm,
    get_reasoning_llm,
    MissingCredentialError,
)

from factcheck.llm.invoker import (
    invoke_llm,
    LLMInvocationError,
)

from factcheck.llm.parser import (
    extract_json,
    JSONExtractionError,
)

from factcheck.llm.validators import (
    validate_plan,
    validate_verdict,
)

__all__ = [
    # Client
    "get_planning_llm",
    "get_reasoning_llm",
    "MissingCredentialError",
    # Invoker
    "invoke_llm",
    "LLMInvocationError",
    # Parser
    "extract_json",
    "JSONExtractionError",
    # Validators
    "validate_plan",
    "validate_verdict",
]
