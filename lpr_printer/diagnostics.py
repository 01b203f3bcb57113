"""Append-only diagnostic log kept by each printer client."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    MESSAGE = "message"
    ERROR = "error"


@dataclass(frozen=True)
class DiagnosticEvent:
    message: str
    kind: EventKind = EventKind.MESSAGE
    timestamp: datetime = field(default_factory=datetime.now)


class DiagnosticLog:
    """
    Ordered record of what a client did.
    Events are only ever appended; every event is mirrored to the logger.
    """

    def __init__(self):
        self._events: List[DiagnosticEvent] = []

    def message(self, message: str) -> DiagnosticEvent:
        event = DiagnosticEvent(message, EventKind.MESSAGE)
        self._events.append(event)
        logger.info(message)
        return event

    def error(self, message: str) -> DiagnosticEvent:
        event = DiagnosticEvent(message, EventKind.ERROR)
        self._events.append(event)
        logger.error(message)
        return event

    @property
    def events(self) -> Tuple[DiagnosticEvent, ...]:
        return tuple(self._events)

    @property
    def last_error(self) -> Optional[str]:
        for event in reversed(self._events):
            if event.kind is EventKind.ERROR:
                return event.message
        return None

    def __len__(self):
        return len(self._events)

    def __iter__(self):
        return iter(self.events)
