"""Actor: report the analysis.

The only action is displaying the result. Reporting can never change the
verdict and can never take the run down: a failure while rendering or
writing becomes a failed ActionRecord.
"""

import sys
from typing import Optional, TextIO

from factcheck.schemas.agent import ActionRecord, Perception, Reasoning
from factcheck.utils.logging import log, get_logger

MODULE = "actor"
logger = get_logger()

RULE = "═" * 60


def render_report(claim: str, perception: Perception, reasoning: Reasoning) -> str:
    lines = [
        "",
        "AGENT ANALYSIS COMPLETE:",
        RULE,
        f"Claim: {claim}",
        f"Verdict: {reasoning.verdict}",
        f"Confidence: {reasoning.confidence:g}%",
        f"Sources: {perception.metadata.organic_results_count}",
        f"Search Strategy: {perception.strategy}",
    ]
    if perception.sub_queries:
        lines.append(f"Sub-queries: {', '.join(perception.sub_queries)}")
    lines.append(f"Explanation: {reasoning.explanation}")
    lines.append(RULE)
    return "\n".join(lines) + "\n"


class Reporter:
    def __init__(self, stream: Optional[TextIO] = None):
        # Resolved per call so a redirected sys.stdout is honoured
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def act(self, claim: str, perception: Perception, reasoning: Reasoning) -> ActionRecord:
        """Display the analysis. Never raises."""
        try:
            self.stream.write(render_report(claim, perception, reasoning))
            self.stream.flush()
        except Exception as e:
            log.error(logger, MODULE, "act_failed", "Action phase failed",
                      error=str(e), error_type=type(e).__name__)
            return ActionRecord(claim=claim, actions_taken=[], status="failed", error=str(e))

        log.info(logger, MODULE, "act_done", "Results displayed")
        return ActionRecord(claim=claim, actions_taken=["display_results"], status="success")
