"""Reporter facade: materializes a run, applies events, projects results."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import structlog

from runreporter.config.settings import get_settings
from runreporter.exceptions import ReporterStateError
from runreporter.models.events import RetryPayload, SuiteDescriptor
from runreporter.models.results import RunResult, RunStats
from runreporter.registry.registry import RunnableRegistry
from runreporter.reporter.normalizer import EventNormalizer
from runreporter.reporter.observers import LoggingObserver, ObserverBus
from runreporter.reporter.projector import ResultProjector, set_video_timestamp
from runreporter.reporter.stats import RunStatistics
from runreporter.reporter.titles import title_path
from runreporter.types import EventKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from runreporter.models.results import TestResult
    from runreporter.reporter.normalizer import NormalizedEvent
    from runreporter.reporter.observers import ReporterObserver

logger = structlog.get_logger(__name__)


class Reporter:
    """Canonical model of one test run, fed by execution-engine events.

    Events are applied one at a time under a single lock, so a reporter may
    be shared between the thread delivering events and one taking progress
    snapshots.
    """

    def __init__(
        self,
        reporter_name: str | None = None,
        reporter_options: Mapping[str, Any] | None = None,
        project_root: str | None = None,
        observers: Iterable[ReporterObserver] = (),
    ) -> None:
        settings = get_settings()
        self.reporter_name = reporter_name or settings.reporter_name
        self.reporter_options = dict(reporter_options or {})
        self.project_root = project_root

        self._lock = threading.Lock()
        self._bus = ObserverBus()
        if settings.log_events:
            self._bus.subscribe(LoggingObserver())
        for observer in observers:
            self._bus.subscribe(observer)

        self._registry: RunnableRegistry | None = None
        self._stats: RunStatistics | None = None
        self._normalizer: EventNormalizer | None = None

    @classmethod
    def create(
        cls,
        reporter_name: str | None = None,
        reporter_options: Mapping[str, Any] | None = None,
        project_root: str | None = None,
    ) -> Reporter:
        return cls(reporter_name, reporter_options, project_root)

    @property
    def registry(self) -> RunnableRegistry | None:
        return self._registry

    def subscribe(self, observer: ReporterObserver) -> None:
        self._bus.subscribe(observer)

    def unsubscribe(self, observer: ReporterObserver) -> None:
        self._bus.unsubscribe(observer)

    def set_runnables(self, root: Mapping[str, Any] | None = None) -> None:
        """Start a fresh run from the declared tree of suites and tests."""
        descriptor = SuiteDescriptor.model_validate(root or {"title": ""})
        with self._lock:
            registry = RunnableRegistry()
            registry.create_root(descriptor)
            self._registry = registry
            self._stats = RunStatistics()
            self._normalizer = EventNormalizer(registry, self._stats)
        logger.info("run_initialized", reporter=self.reporter_name, runnables=len(registry))

    def emit(self, event: str, payload: Mapping[str, Any] | None = None) -> NormalizedEvent | None:
        """Apply one engine event and notify observers.

        Returns the normalized event, or None for event names that are not
        tracked.
        """
        with self._lock:
            if self._normalizer is None:
                msg = f"Event {event!r} received before set_runnables()"
                raise ReporterStateError(msg)

            if event == EventKind.RETRY and self.reporter_name == "spec":
                self._log_retry(self._normalizer.registry, payload or {})

            normalized = self._normalizer.apply(event, payload)
            if normalized is not None:
                self._bus.notify(normalized)
            return normalized

    def _log_retry(self, registry: RunnableRegistry, raw: Mapping[str, Any]) -> None:
        payload = RetryPayload.model_validate(raw)
        test = registry.get_test(payload.id)
        logger.info(
            "test_retry",
            title=payload.title,
            attempt=f"Attempt {payload.current_retry + 1} of {payload.retries + 1}",
            depth=len(title_path(test)),
        )

    def results(self) -> RunResult:
        """Snapshot the run; before set_runnables() this is an empty result."""
        with self._lock:
            if self._registry is None or self._stats is None:
                return RunResult(stats=RunStats(), reporter=self.reporter_name)
            return ResultProjector(self._registry, self._stats, self.reporter_name).project()

    def end(self) -> RunResult:
        result = self.results()
        logger.info(
            "run_completed",
            reporter=self.reporter_name,
            tests=result.stats.tests,
            passes=result.stats.passes,
            failures=result.stats.failures,
            pending=result.stats.pending,
            skipped=result.stats.skipped,
            duration_ms=result.stats.wall_clock_duration,
        )
        return result

    def replay(self, events: Iterable[tuple[str, Mapping[str, Any] | None]]) -> RunResult:
        """Apply recorded events in order and return the resulting snapshot."""
        for event, payload in events:
            self.emit(event, payload)
        return self.results()

    @staticmethod
    def set_video_timestamp(video_start: Any, tests: Iterable[TestResult]) -> list[TestResult]:
        return set_video_timestamp(video_start, tests)
