"""Pluggable observers for normalized reporter events."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Protocol

import structlog

from runreporter.types import EventKind

if TYPE_CHECKING:
    from runreporter.reporter.normalizer import NormalizedEvent

logger = structlog.get_logger(__name__)


class ReporterObserver(Protocol):
    def on_event(self, event: NormalizedEvent) -> None: ...


class ObserverBus:
    """In-process fan-out of normalized events to registered observers.

    Observers are called in registration order on the thread applying the
    event. An observer that raises is logged and skipped so that rendering
    problems never corrupt the run model.
    """

    def __init__(self) -> None:
        self._observers: list[ReporterObserver] = []

    def subscribe(self, observer: ReporterObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: ReporterObserver) -> None:
        with contextlib.suppress(ValueError):
            self._observers.remove(observer)

    def notify(self, event: NormalizedEvent) -> None:
        for observer in list(self._observers):
            try:
                observer.on_event(event)
            except Exception:
                logger.exception(
                    "observer_failed",
                    observer=type(observer).__name__,
                    event_name=event.kind.value,
                )

    def __len__(self) -> int:
        return len(self._observers)


class LoggingObserver:
    """Writes test progress to the structured log."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("runreporter.progress")

    def on_event(self, event: NormalizedEvent) -> None:
        payload = event.payload
        depth = len(payload.get("titlePath", []))

        if event.kind == EventKind.SUITE_ENTER and payload.get("title"):
            self._log.info("suite_started", title=payload["title"], depth=depth)
        elif event.kind == EventKind.PASS:
            self._log.info(
                "test_passed",
                title=payload.get("title"),
                duration_ms=payload.get("duration"),
                depth=depth,
            )
        elif event.kind == EventKind.PENDING:
            self._log.info("test_pending", title=payload.get("title"), depth=depth)
        elif event.kind == EventKind.FAIL:
            self._log.error(
                "test_failed",
                title=payload.get("title"),
                error=event.err.message if event.err else None,
                hook=payload.get("hookName"),
                depth=depth,
            )
        elif event.kind == EventKind.RUN_END:
            self._log.info("run_ended", end=payload.get("end"))
