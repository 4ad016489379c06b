"""
Structured Logging

Every log line is JSON with consistent, queryable fields: module, action,
and whatever context the caller attaches (claim, strategy, latency_ms, ...).

LOKI / JQ QUERIES
=================
# All errors
{project="factcheck"} | json | level="ERROR"

# Every fallback the pipeline took
{project="factcheck"} | json | action=~".*_fallback"

# Planner decisions
{project="factcheck"} | json | module="planner" action="plan_done"

# Search latency
{project="factcheck"} | json | module="search" action="search_done"

USAGE
=====
from factcheck.utils.logging import log, get_logger, configure_logging

logger = get_logger()
log.info(logger, "executor", "fanout_start", "Running sub-searches",
         query_count=3)

log.error(logger, "reasoner", "reason_failed", "Model call failed",
          error=str(e), error_type=type(e).__name__)

ACTION NAMING
=============
Consistent suffixes for queryable actions:
  *_start     — beginning of an operation
  *_done      — successful completion
  *_failed    — error/failure
  *_skipped   — intentionally skipped
  *_fallback  — falling back to alternative path
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


def _utc_ts() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredFormatter(logging.Formatter):
    """JSON formatter, with a human-readable mode for terminals."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        # Structured log (emitted via StructuredLogger)
        if getattr(record, "_structured", False):
            data = {
                "ts": _utc_ts(),
                "level": record.levelname,
                "module": record._module,
                "action": record._action,
                "msg": msg,
            }
            for key, value in record._extra.items():
                if value is not None:
                    data[key] = value

            if self.pretty:
                return self._pretty(data)
            return json.dumps(data, default=str, separators=(",", ":"))

        # Third-party log: wrap in JSON so collectors can still parse it
        if self.pretty:
            return f"{_utc_ts()[11:23]} {record.levelname[0]} [{record.name}] {msg}"
        return json.dumps(
            {
                "ts": _utc_ts(),
                "level": record.levelname,
                "module": "external",
                "logger": record.name,
                "action": "log",
                "msg": msg,
            },
            default=str,
            separators=(",", ":"),
        )

    def _pretty(self, data: dict) -> str:
        """Human-readable format for development."""
        ts = data["ts"][11:23]  # HH:MM:SS.mmm
        lvl = data["level"][0]  # I/W/E/D
        mod = data["module"].upper()[:10].ljust(10)
        act = data["action"]
        msg = data["msg"]

        skip = {"ts", "level", "module", "action", "msg"}
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in skip)

        return f"{ts} {lvl} [{mod}] {act}: {msg}" + (f" | {ctx}" if ctx else "")


class StructuredLogger:
    """
    Centralized structured logging.

    All methods accept a stdlib logging.Logger, a module name, an action
    name, a message, and arbitrary context fields. Context fields that are
    None are dropped.
    """

    def _log(
        self,
        logger: logging.Logger,
        level: int,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        extra = {
            "_structured": True,
            "_module": module,
            "_action": action,
            "_extra": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    def info(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log INFO level."""
        self._log(logger, logging.INFO, module, action, msg, **kwargs)

    def warning(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log WARNING level."""
        self._log(logger, logging.WARNING, module, action, msg, **kwargs)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log ERROR level."""
        self._log(
            logger, logging.ERROR, module, action, msg,
            error=error, error_type=error_type, **kwargs,
        )

    def debug(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log DEBUG level."""
        self._log(logger, logging.DEBUG, module, action, msg, **kwargs)


# Singleton instance, import this everywhere
log = StructuredLogger()

_default_logger = None


def get_logger() -> logging.Logger:
    """Get the shared application logger."""
    global _default_logger
    if _default_logger is None:
        _default_logger = logging.getLogger("factcheck")
    return _default_logger


def configure_logging(fmt: Optional[str] = None, level: Optional[str] = None) -> None:
    """Configure the root logger with the structured formatter. Call once at startup.

    Arguments override the environment:
      LOG_FORMAT: "json" (default) or "pretty"
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"

    Logs go to stderr so stdout stays free for the report and --json output.
    """
    fmt = (fmt or os.environ.get("LOG_FORMAT", "json")).lower()
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(pretty=fmt == "pretty"))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        handlers=[handler],
        force=True,
    )

    # LangChain / LangGraph / OpenAI SDK: extremely chatty at DEBUG
    for name in ("langchain", "langchain_core", "langchain_openai", "langgraph", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)

    # HTTP clients
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
