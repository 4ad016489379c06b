"""Pipeline event emission.

Components report what they are doing (phase started/completed, strategy
chosen, fallback triggered) through an EventSink instead of printing. The
default sink forwards every event to the structured logger; tests inject a
RecordingEventSink and assert on the recorded events.

Event names:
  phase_started / phase_completed / phase_failed   (phase=perceive|reason|act)
  plan_decided        (needs_breakdown, sub_query_count)
  strategy_chosen     (strategy=single|decomposed)
  search_completed    (query, organic_count)
  fallback_triggered  (component, reason)
  run_completed / run_failed
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from factcheck.utils.logging import log, get_logger

MODULE = "events"


class EventSink(Protocol):
    def emit(self, name: str, **fields: Any) -> None:
        ...


@dataclass(frozen=True)
class Event:
    name: str
    fields: dict[str, Any]


class LoggingEventSink:
    """Forward events to the structured logger at INFO level."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger()

    def emit(self, name: str, **fields: Any) -> None:
        log.info(self.logger, MODULE, name, name.replace("_", " ").capitalize(), **fields)


@dataclass
class RecordingEventSink:
    """Keep events in memory, in emission order."""

    events: list[Event] = field(default_factory=list)

    def emit(self, name: str, **fields: Any) -> None:
        self.events.append(Event(name=name, fields=dict(fields)))

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> list[Event]:
        return [e for e in self.events if e.name == name]


class NullEventSink:
    def emit(self, name: str, **fields: Any) -> None:
        pass
