"""Runtime configuration.

One Settings value is built at process start (Settings.from_env()) and
handed to whatever needs it: the search client, the LLM clients, the agent.
Nothing reads the environment after that.

Environment:
  OPENAI_API_KEY              — required for planning (soft) and reasoning (hard)
  OPENAI_BASE_URL             — optional OpenAI-compatible endpoint
  FACTCHECK_PLANNER_MODEL     — default gpt-4o-mini
  FACTCHECK_REASONER_MODEL    — default o4-mini
  FACTCHECK_LLM_MAX_RETRIES   — default 2
  BRIGHT_DATA_CUSTOMER_ID     — SERP proxy identity
  BRIGHT_DATA_ZONE
  BRIGHT_DATA_PASSWORD
  BRIGHT_DATA_PROXY_HOST      — default brd.superproxy.io
  BRIGHT_DATA_PROXY_PORT      — default 33335
  FACTCHECK_SEARCH_TIMEOUT    — transport timeout in seconds, default 30
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_PLANNER_MODEL = "gpt-4o-mini"
DEFAULT_REASONER_MODEL = "o4-mini"
DEFAULT_PROXY_HOST = "brd.superproxy.io"
DEFAULT_PROXY_PORT = 33335


def _secret(name: str) -> Optional[SecretStr]:
    value = os.getenv(name, "").strip()
    return SecretStr(value) if value else None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[SecretStr] = None
    openai_base_url: Optional[str] = None
    planner_model: str = DEFAULT_PLANNER_MODEL
    reasoner_model: str = DEFAULT_REASONER_MODEL
    llm_max_retries: int = Field(default=2, ge=0)

    bright_data_customer_id: Optional[str] = None
    bright_data_zone: Optional[str] = None
    bright_data_password: Optional[SecretStr] = None
    proxy_host: str = DEFAULT_PROXY_HOST
    proxy_port: int = DEFAULT_PROXY_PORT
    search_timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=_secret("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            planner_model=os.getenv("FACTCHECK_PLANNER_MODEL", DEFAULT_PLANNER_MODEL),
            reasoner_model=os.getenv("FACTCHECK_REASONER_MODEL", DEFAULT_REASONER_MODEL),
            llm_max_retries=int(os.getenv("FACTCHECK_LLM_MAX_RETRIES", "2")),
            bright_data_customer_id=os.getenv("BRIGHT_DATA_CUSTOMER_ID") or None,
            bright_data_zone=os.getenv("BRIGHT_DATA_ZONE") or None,
            bright_data_password=_secret("BRIGHT_DATA_PASSWORD"),
            proxy_host=os.getenv("BRIGHT_DATA_PROXY_HOST", DEFAULT_PROXY_HOST),
            proxy_port=int(os.getenv("BRIGHT_DATA_PROXY_PORT", str(DEFAULT_PROXY_PORT))),
            search_timeout=float(os.getenv("FACTCHECK_SEARCH_TIMEOUT", "30")),
        )

    @property
    def has_openai_credentials(self) -> bool:
        return self.openai_api_key is not None

    @property
    def has_search_credentials(self) -> bool:
        return bool(
            self.bright_data_customer_id
            and self.bright_data_zone
            and self.bright_data_password
        )

    @property
    def proxy_url(self) -> str:
        """Bright Data super-proxy URL with the zone credentials embedded."""
        password = self.bright_data_password.get_secret_value() if self.bright_data_password else ""
        return (
            f"http://brd-customer-{self.bright_data_customer_id}-zone-{self.bright_data_zone}"
            f":{password}@{self.proxy_host}:{self.proxy_port}"
        )
