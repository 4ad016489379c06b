"""Build the perception record handed to the reasoning step.

Single pass over one bundle: every item is projected down to the fields
reasoning needs (provenance tags and provider extras are dropped), and the
metadata counts are computed from that cleaned structure. The untrimmed
execution payload rides along in ``raw`` for audit and debugging.
"""

from typing import Any, Optional, Union

from factcheck.schemas.agent import (
    DecomposedSearchResult,
    Perception,
    PerceptionMetadata,
    SingleSearchResult,
    Strategy,
)
from factcheck.schemas.search import (
    Answer,
    Fact,
    KnowledgePanel,
    OrganicResult,
    RelatedQuestion,
    SearchResultBundle,
)


def clean_bundle(bundle: SearchResultBundle) -> SearchResultBundle:
    """Project every item of ``bundle`` to its fixed field subset."""
    organic = [
        OrganicResult(
            title=item.title,
            description=item.description,
            link=item.link,
            display_link=item.display_link,
        )
        for item in bundle.organic
    ]

    knowledge = None
    if bundle.knowledge is not None:
        knowledge = KnowledgePanel(
            description=bundle.knowledge.description,
            facts=[Fact(key=f.key, value=f.value) for f in bundle.knowledge.facts],
        )

    people_also_ask = [
        RelatedQuestion(
            question=q.question,
            answers=[Answer(text=a.text) for a in q.answers],
        )
        for q in bundle.people_also_ask
    ]

    return SearchResultBundle(
        organic=organic,
        knowledge=knowledge,
        people_also_ask=people_also_ask,
    )


def build_perception(
    bundle: SearchResultBundle,
    claim: str,
    strategy: Strategy,
    sub_queries: Optional[list[str]] = None,
    raw: Optional[dict[str, Any]] = None,
) -> Perception:
    """Turn a result bundle plus run metadata into a Perception."""
    evidence = clean_bundle(bundle)
    return Perception(
        claim=claim,
        strategy=strategy,
        sub_queries=list(sub_queries) if sub_queries is not None else None,
        evidence=evidence,
        raw=raw if raw is not None else bundle.model_dump(mode="json"),
        metadata=PerceptionMetadata(
            organic_results_count=len(evidence.organic),
            has_knowledge_graph=evidence.knowledge is not None,
            people_also_ask_count=len(evidence.people_also_ask),
            used_plan_decomposition=strategy == "decomposed",
        ),
    )


def perception_from_execution(
    claim: str, result: Union[SingleSearchResult, DecomposedSearchResult],
) -> Perception:
    """Pick the evidence bundle out of either execution shape."""
    if isinstance(result, DecomposedSearchResult):
        return build_perception(result.merged, claim, "decomposed", result.sub_queries,
                                result.model_dump(mode="json"))
    if isinstance(result, SingleSearchResult):
        return build_perception(result.bundle, claim, "single", None,
                                result.model_dump(mode="json"))
    raise TypeError(f"Unknown execution result: {type(result).__name__}")
