"""Semantic validators for LLM outputs.

These check domain constraints BEYOND schema validation. Schema
validation ensures the JSON has the right shape; semantic validation
ensures the content is usable.

- Plan: sub-queries must be distinct
- Verdict: explanation must say something
- Verdict: confidence and verdict should be consistent (warning only)
"""

from factcheck.schemas.llm_outputs import DecompositionPlan, VerdictOutput
from factcheck.utils.logging import log, get_logger

MODULE = "llm.validators"
logger = get_logger()


def validate_plan(output: DecompositionPlan) -> tuple[bool, str]:
    """Validate a decomposition plan.

    Checks:
    1. Sub-queries are distinct (case-insensitive)
    2. A lone sub-query is a warning: decomposing into one search is
       just a rephrased single search, but it still runs
    """
    if not output.needs_breakdown:
        return True, ""

    normalized = [q.lower() for q in output.sub_queries]
    if len(set(normalized)) != len(normalized):
        return False, "Sub-queries contain duplicates"

    if len(output.sub_queries) == 1:
        log.warning(logger, MODULE, "single_sub_query",
                    "Plan decomposes into only one sub-query",
                    sub_query=output.sub_queries[0])

    return True, ""


def validate_verdict(output: VerdictOutput) -> tuple[bool, str]:
    """Validate a verdict.

    Checks:
    1. Explanation exists
    2. Confidence/verdict consistency (warnings only, the model may
       have good reasons)
    """
    if not output.explanation or len(output.explanation.strip()) < 10:
        return False, "Explanation is empty or too short"

    if output.verdict in ("True", "False") and output.confidence < 30:
        log.warning(logger, MODULE, "low_confidence_strong_verdict",
                    f"Strong verdict '{output.verdict}' with low confidence {output.confidence}",
                    verdict=output.verdict, confidence=output.confidence)

    if output.verdict == "Unverifiable" and output.confidence > 80:
        log.warning(logger, MODULE, "high_confidence_unverifiable",
                    f"Unverifiable verdict with high confidence {output.confidence}",
                    verdict=output.verdict, confidence=output.confidence)

    return True, ""
