"""Progress events, sinks and cancellation for a single run."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from .errors import RunCancelled
from .logging import get_logger


class ProgressPhase(str, Enum):
    PARSING = "parsing"
    FETCHING = "fetching"
    ANALYZING = "analyzing"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def terminal(self) -> bool:
        return self in (ProgressPhase.COMPLETE, ProgressPhase.ERROR)


@dataclass(frozen=True)
class ProgressEvent:
    phase: ProgressPhase
    percent: int
    message: str
    estimated_seconds_remaining: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "phase": self.phase.value,
            "percent": self.percent,
            "message": self.message,
        }
        if self.estimated_seconds_remaining is not None:
            payload["estimatedSecondsRemaining"] = self.estimated_seconds_remaining
        return payload


class ProgressSink(Protocol):
    """Receives the progress events of a run."""

    def emit(self, run_id: str, event: ProgressEvent) -> None:
        ...


class NullSink:
    def emit(self, run_id: str, event: ProgressEvent) -> None:
        return None


class RecordingSink:
    """Keeps every event in memory, grouped by run id."""

    def __init__(self) -> None:
        self.events: Dict[str, List[ProgressEvent]] = {}

    def emit(self, run_id: str, event: ProgressEvent) -> None:
        self.events.setdefault(run_id, []).append(event)


class LoggingSink:
    """Writes progress to the readmegen logger (used by the CLI)."""

    def __init__(self) -> None:
        self.logger = get_logger("progress")

    def emit(self, run_id: str, event: ProgressEvent) -> None:
        self.logger.info("[%3d%%] %s: %s", event.percent, event.phase.value, event.message)


class CancellationToken:
    """Thread-safe flag checked by the pipeline at every network call."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelled("Run was cancelled by the caller")


class ProgressReporter:
    """Per-run emitter that keeps percent non-decreasing and ends with one terminal event.

    Events are dropped once the run is cancelled or after a terminal event
    has been delivered.
    """

    def __init__(
        self,
        sink: ProgressSink | None,
        run_id: str,
        *,
        cancel: CancellationToken | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sink = sink or NullSink()
        self.run_id = run_id
        self._cancel = cancel
        self._clock = clock
        self._started = clock()
        self._percent = 0
        self._closed = False
        self.logger = get_logger("progress")

    @property
    def percent(self) -> int:
        return self._percent

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, phase: ProgressPhase, percent: float, message: str) -> None:
        if self._closed or (self._cancel is not None and self._cancel.cancelled):
            return
        value = max(self._percent, min(100, int(percent)))
        self._percent = value
        eta = None if phase.terminal else self._estimate_remaining(value)
        event = ProgressEvent(
            phase=phase,
            percent=value,
            message=message,
            estimated_seconds_remaining=eta,
        )
        if phase.terminal:
            self._closed = True
        try:
            self._sink.emit(self.run_id, event)
        except Exception:  # pragma: no cover
            self.logger.warning("Progress sink failed for run %s", self.run_id, exc_info=True)

    def complete(self, message: str = "README generated") -> None:
        self.emit(ProgressPhase.COMPLETE, 100, message)

    def fail(self, message: str) -> None:
        self.emit(ProgressPhase.ERROR, self._percent, message)

    def _estimate_remaining(self, percent: int) -> Optional[float]:
        if percent <= 0:
            return None
        elapsed = self._clock() - self._started
        return round(elapsed * (100 - percent) / percent, 1)


__all__ = [
    "CancellationToken",
    "LoggingSink",
    "NullSink",
    "ProgressEvent",
    "ProgressPhase",
    "ProgressReporter",
    "ProgressSink",
    "RecordingSink",
]
