"""LLM client configuration.

Two OpenAI chat clients, both built from the same Settings value:

  get_planning_llm()  → small fast model (gpt-4o-mini): decompose or not
  get_reasoning_llm() → reasoning model (o4-mini): verdict + confidence

Neither function reads the environment. A missing OPENAI_API_KEY raises
MissingCredentialError here; callers decide whether that is a soft skip
(planner) or fatal (reasoner).
"""

from typing import Optional

from langchain_openai import ChatOpenAI

from factcheck.config import Settings
from factcheck.utils.logging import log, get_logger

MODULE = "llm"
logger = get_logger()


class MissingCredentialError(RuntimeError):
    """Raised when the language-model API key is not configured."""


def _build(settings: Settings, model: str, temperature: Optional[float], max_tokens: int) -> ChatOpenAI:
    if not settings.has_openai_credentials:
        raise MissingCredentialError("OPENAI_API_KEY environment variable is not set")

    kwargs = dict(
        model=model,
        api_key=settings.openai_api_key,
        max_tokens=max_tokens,
    )
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    # o-series models reject any temperature other than the default
    if temperature is not None:
        kwargs["temperature"] = temperature

    client = ChatOpenAI(**kwargs)
    log.debug(logger, MODULE, "llm_init", "LLM client created",
              model=model, temperature=temperature, base_url=settings.openai_base_url)
    return client


def get_planning_llm(settings: Settings, temperature: float = 0.1) -> ChatOpenAI:
    """Client for the decomposition decision.

    Args:
        settings: Runtime settings (credential, model name, base URL).
        temperature: Low by default; the planner should be consistent.
    """
    return _build(settings, settings.planner_model, temperature, max_tokens=1024)


def get_reasoning_llm(settings: Settings) -> ChatOpenAI:
    """Client for the verdict.

    Reasoning models spend part of the token budget thinking before they
    answer, hence the larger max_tokens.
    """
    return _build(settings, settings.reasoner_model, None, max_tokens=8192)
