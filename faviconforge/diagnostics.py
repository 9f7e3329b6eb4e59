from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticEvent:
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    level: int = logging.ERROR


class DiagnosticsSink:
    """Receives non-fatal failures. The default implementation drops them."""

    def report(self, event: DiagnosticEvent) -> None:
        return None


class LoggingDiagnostics(DiagnosticsSink):
    def __init__(self, target: Optional[logging.Logger] = None) -> None:
        self._logger = target or logger

    def report(self, event: DiagnosticEvent) -> None:
        context = ", ".join(f"{key}={value}" for key, value in event.context.items())
        if context:
            self._logger.log(event.level, "%s (%s)", event.message, context, extra={"context": event.context})
        else:
            self._logger.log(event.level, "%s", event.message, extra={"context": event.context})


class RecordingDiagnostics(DiagnosticsSink):
    """Keeps reported events in memory, e.g. to surface them in a summary."""

    def __init__(self, forward: Optional[DiagnosticsSink] = None) -> None:
        self.events: List[DiagnosticEvent] = []
        self._forward = forward

    def report(self, event: DiagnosticEvent) -> None:
        self.events.append(event)
        if self._forward is not None:
            self._forward.report(event)


NULL_DIAGNOSTICS = DiagnosticsSink()
