"""FastAPI application for factcheck.

Logging: Uses structured JSON logging.
Set LOG_FORMAT=pretty for development-friendly output.

  uvicorn factcheck.api.app:app
"""

from contextlib import asynccontextmanager

# Configure structured logging BEFORE importing anything else
from factcheck.utils.logging import configure_logging, get_logger, log  # noqa: E402

configure_logging()

MODULE = "api"
logger = get_logger()

from fastapi import FastAPI  # noqa: E402

from factcheck import __version__  # noqa: E402
from factcheck.agent.orchestrator import FactCheckAgent  # noqa: E402
from factcheck.api.routes.health import router as health_router  # noqa: E402
from factcheck.api.routes.checks import router as checks_router  # noqa: E402
from factcheck.config import Settings  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown."""
    settings = Settings.from_env()
    app.state.agent = FactCheckAgent(settings)
    log.info(logger, MODULE, "ready", "Agent ready",
             planner_model=settings.planner_model,
             reasoner_model=settings.reasoner_model,
             openai_configured=settings.has_openai_credentials,
             search_configured=settings.has_search_credentials)

    yield

    log.info(logger, MODULE, "shutdown", "Application shutdown complete")


app = FastAPI(
    title="factcheck",
    description="Claim verification API",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(checks_router, prefix="/checks", tags=["checks"])
