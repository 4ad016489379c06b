"""Command-line entrypoint.

  factcheck "The Eiffel Tower is in Paris"
  factcheck --json "Vaccines cause autism and are unsafe for children"

Exit code 0 when the run produced a verdict, 1 when it failed. Logs go to
stderr; the report (or the JSON result with --json) goes to stdout.
"""

import asyncio
import io
from typing import Optional

import typer

from factcheck.agent.orchestrator import FactCheckAgent
from factcheck.config import Settings
from factcheck.schemas.agent import AgentFailure
from factcheck.utils.logging import configure_logging, get_logger, log

MODULE = "cli"
logger = get_logger()

DEFAULT_CLAIM = "Vaccines cause autism and are unsafe for children"

app = typer.Typer(help="Fact-check a claim with web search and an LLM verdict")


@app.command()
def check(
    claim: Optional[str] = typer.Argument(None, help="Claim to fact-check"),
    as_json: bool = typer.Option(False, "--json", help="Print the full agent result as JSON"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="json or pretty"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """Run one Perceive → Reason → Act cycle over CLAIM."""
    configure_logging(fmt=log_format, level=log_level)
    claim = claim or DEFAULT_CLAIM

    log.info(logger, MODULE, "start", "Processing claim", claim=claim)

    # With --json the report is swallowed so stdout holds only the JSON
    stream = io.StringIO() if as_json else None
    try:
        agent = FactCheckAgent(Settings.from_env(), stream=stream)
    except ValueError as e:
        log.error(logger, MODULE, "config_failed", "Invalid configuration",
                  error=str(e), error_type=type(e).__name__)
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)
    result = asyncio.run(agent.agent_tick(claim))

    if as_json:
        typer.echo(result.model_dump_json(indent=2))

    if isinstance(result, AgentFailure):
        log.error(logger, MODULE, "failed", "Agent execution failed", error=result.error)
        if not as_json:
            typer.echo(f"Agent execution failed: {result.error}", err=True)
        raise typer.Exit(code=1)

    log.info(logger, MODULE, "done", "Agent execution completed",
             latency_ms=result.execution_time_ms,
             verdict=result.summary.verdict, confidence=result.summary.confidence)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
