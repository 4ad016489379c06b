"""Merge several search result bundles into one evidence set.

Pure and deterministic: the output depends only on the order of the
input bundles, never on which search finished first.

  organic          — concatenated in bundle order then item order, tagged
                     with the producing query, deduplicated by exact link
                     (first occurrence wins)
  knowledge        — the first non-null panel
  people_also_ask  — concatenated, duplicates kept
"""

from typing import Sequence

from factcheck.schemas.search import OrganicResult, SearchResultBundle
from factcheck.utils.logging import log, get_logger

MODULE = "merger"
logger = get_logger()


def source_label(index: int, bundle_count: int) -> str:
    """Human label for the query that produced bundle ``index``."""
    if bundle_count == 1:
        return "main-search"
    return f"sub-search-{index + 1}"


def merge_results(bundles: Sequence[SearchResultBundle]) -> SearchResultBundle:
    """Combine bundles into one, removing duplicate organic links.

    Items are copied before tagging; the input bundles are left untouched.
    Links are compared as exact strings. A missing link counts as one key,
    so only the first link-less item survives.
    """
    count = len(bundles)

    tagged: list[OrganicResult] = []
    for index, bundle in enumerate(bundles):
        label = source_label(index, count)
        for item in bundle.organic:
            tagged.append(item.model_copy(update={
                "source_query_index": index,
                "source_query": label,
            }))

    seen_links: set = set()
    organic: list[OrganicResult] = []
    for item in tagged:
        if item.link in seen_links:
            continue
        seen_links.add(item.link)
        organic.append(item)

    knowledge = next((b.knowledge for b in bundles if b.knowledge is not None), None)

    people_also_ask = [q for b in bundles for q in b.people_also_ask]

    log.info(logger, MODULE, "merge_done", "Merged search results",
             bundle_count=count, organic_before=len(tagged),
             organic_after=len(organic), duplicates=len(tagged) - len(organic),
             people_also_ask_count=len(people_also_ask),
             has_knowledge=knowledge is not None)

    return SearchResultBundle(
        organic=organic,
        knowledge=knowledge,
        people_also_ask=people_also_ask,
    )
