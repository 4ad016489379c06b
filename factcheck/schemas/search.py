"""Pydantic schemas for search result bundles.

A SearchResultBundle is what one web search returns, normalized from the
SERP provider's JSON: organic results, an optional knowledge panel, and
"people also ask" questions.

Organic items allow extra fields so provider extras (rank, image, ...) and
merge provenance survive until the perception step trims them.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrganicResult(BaseModel):
    """A standard web search result. `link` is its identity."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    display_link: Optional[str] = None
    # Set by the merger: which sub-query produced this item
    source_query_index: Optional[int] = None
    source_query: Optional[str] = None


class Fact(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    value: Any = None


class KnowledgePanel(BaseModel):
    """Structured fact box attached to a query."""

    model_config = ConfigDict(frozen=True, extra="allow")

    description: Optional[str] = None
    facts: list[Fact] = Field(default_factory=list)


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None


class RelatedQuestion(BaseModel):
    """A "people also ask" entry."""

    model_config = ConfigDict(frozen=True, extra="allow")

    question: Optional[str] = None
    answers: list[Answer] = Field(default_factory=list)


class SearchResultBundle(BaseModel):
    model_config = ConfigDict(frozen=True)

    organic: list[OrganicResult] = Field(default_factory=list)
    knowledge: Optional[KnowledgePanel] = None
    people_also_ask: list[RelatedQuestion] = Field(default_factory=list)
