"""Pydantic schemas for LLM outputs.

These schemas define the EXACT structure expected from each LLM call.
All LLM responses are validated against these schemas before being used.

Benefits:
1. Clear contract: Documents what each LLM call should return
2. Fail-fast: Bad output raises ValidationError immediately
3. Type safety: Downstream code can trust the shape
"""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


# =============================================================================
# VERDICT LABELS
# =============================================================================

Verdict = Literal[
    "True",
    "Likely True",
    "Misleading",
    "False",
    "Likely False",
    "Unverifiable",
]

VERDICTS: tuple[str, ...] = (
    "True",
    "Likely True",
    "Misleading",
    "False",
    "Likely False",
    "Unverifiable",
)

# Spellings models produce that mean one of the canonical labels
_VERDICT_VARIATIONS = {
    "true": "True",
    "likely true": "Likely True",
    "mostly true": "Likely True",
    "probably true": "Likely True",
    "misleading": "Misleading",
    "mixed": "Misleading",
    "half true": "Misleading",
    "false": "False",
    "likely false": "Likely False",
    "mostly false": "Likely False",
    "probably false": "Likely False",
    "unverifiable": "Unverifiable",
    "unverified": "Unverifiable",
    "uncertain": "Unverifiable",
    "unknown": "Unverifiable",
    "inconclusive": "Unverifiable",
}

# Hard cap on sub-queries per claim
MAX_SUB_QUERIES = 3


# =============================================================================
# PLAN OUTPUT
# =============================================================================

class DecompositionPlan(BaseModel):
    """Whether to split a claim into focused sub-queries, and which.

    Invariant: needs_breakdown implies at least one sub-query. A plan
    that says "decompose" without queries is rejected, since it cannot
    be executed.
    """

    model_config = ConfigDict(frozen=True)

    needs_breakdown: bool
    sub_queries: list[str] = Field(
        default_factory=list,
        description="2-3 focused search strings, empty for a single search",
    )
    reasoning: str = Field(
        default="",
        description="Why the claim was (or was not) decomposed",
    )

    @field_validator("sub_queries", mode="before")
    @classmethod
    def drop_blank_queries(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [q.strip() for q in v if isinstance(q, str) and q.strip()]
        return v

    @field_validator("sub_queries")
    @classmethod
    def fit_to_breakdown(cls, v, info: ValidationInfo):
        # Queries without a breakdown decision are ignored
        if not info.data.get("needs_breakdown"):
            return []
        return v[:MAX_SUB_QUERIES]

    @model_validator(mode="after")
    def check_breakdown(self) -> "DecompositionPlan":
        if self.needs_breakdown and not self.sub_queries:
            raise ValueError("needs_breakdown is true but no sub_queries were given")
        return self

    @classmethod
    def single(cls, reasoning: str) -> "DecompositionPlan":
        """A plan that runs one search over the claim itself."""
        return cls(needs_breakdown=False, sub_queries=[], reasoning=reasoning)


# =============================================================================
# VERDICT OUTPUT
# =============================================================================

class VerdictOutput(BaseModel):
    """What the reasoning model must return for a claim."""

    verdict: Verdict = Field(..., description="One of the six verdict labels")
    explanation: str = Field(
        ...,
        description="Concise explanation referencing specific search results",
    )
    confidence: float = Field(..., description="Confidence score from 0-100")

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        """Coerce to float and pull into [0, 100]."""
        if isinstance(v, str):
            v = v.strip().rstrip("%")
        try:
            v = float(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"confidence must be a number, got {v!r}") from e
        if not math.isfinite(v):
            raise ValueError("confidence must be a finite number")
        return max(0.0, min(100.0, v))

    @field_validator("verdict", mode="before")
    @classmethod
    def normalize_verdict(cls, v):
        """Handle case, underscore and synonym variations."""
        if isinstance(v, str):
            key = " ".join(v.replace("_", " ").replace("-", " ").split()).lower()
            return _VERDICT_VARIATIONS.get(key, v)
        return v
