"""Tests for the reporting step."""

import io

from conftest import make_bundle

from factcheck.agent.actor import Reporter, render_report
from factcheck.agent.perception import build_perception
from factcheck.schemas.agent import Reasoning

CLAIM = "Vaccines cause autism and are unsafe for children"


class BrokenStream(io.StringIO):
    def write(self, s):
        raise OSError("stdout closed")


def make_inputs(sub_queries=None):
    strategy = "decomposed" if sub_queries else "single"
    perception = build_perception(make_bundle("a", 4), CLAIM, strategy, sub_queries)
    reasoning = Reasoning(
        claim=CLAIM, verdict="False", explanation="No credible evidence supports it.",
        confidence=92.5, sources_analyzed=4, model_id="o4-mini",
    )
    return perception, reasoning


def test_report_contents():
    perception, reasoning = make_inputs(["vaccines autism", "vaccine safety children"])

    report = render_report(CLAIM, perception, reasoning)

    assert "AGENT ANALYSIS COMPLETE:" in report
    assert f"Claim: {CLAIM}" in report
    assert "Verdict: False" in report
    assert "Confidence: 92.5%" in report
    assert "Sources: 4" in report
    assert "Search Strategy: decomposed" in report
    assert "Sub-queries: vaccines autism, vaccine safety children" in report
    assert "Explanation: No credible evidence supports it." in report


def test_single_report_has_no_sub_queries_line():
    perception, reasoning = make_inputs()
    assert "Sub-queries" not in render_report(CLAIM, perception, reasoning)


def test_act_writes_report():
    stream = io.StringIO()
    perception, reasoning = make_inputs()

    record = Reporter(stream).act(CLAIM, perception, reasoning)

    assert record.status == "success"
    assert record.actions_taken == ["display_results"]
    assert record.error is None
    assert "Verdict: False" in stream.getvalue()


def test_act_failure_is_recorded_not_raised():
    perception, reasoning = make_inputs()

    record = Reporter(BrokenStream()).act(CLAIM, perception, reasoning)

    assert record.status == "failed"
    assert record.actions_taken == []
    assert record.error == "stdout closed"


def test_default_stream_is_stdout(capsys):
    perception, reasoning = make_inputs()

    Reporter().act(CLAIM, perception, reasoning)

    assert "AGENT ANALYSIS COMPLETE:" in capsys.readouterr().out
