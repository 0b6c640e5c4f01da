"""Builds the external run snapshot from the registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from runreporter.models.results import (
    AttemptResult,
    ErrorDetail,
    HookResult,
    RunResult,
    SuiteResult,
    TestResult,
)
from runreporter.reporter.stack import stack_without_message
from runreporter.reporter.titles import title_path
from runreporter.utils.timestamps import millis_between, parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable

    from runreporter.models.events import ErrorInfo
    from runreporter.registry.registry import RunnableRegistry
    from runreporter.registry.runnables import (
        AttemptSnapshot,
        HookRecord,
        SuiteRecord,
        TestRecord,
    )
    from runreporter.reporter.stats import RunStatistics

logger = structlog.get_logger(__name__)


def display_error(err: ErrorInfo | None) -> str | None:
    """Human-readable error for the final attempt: its stack, else name and message."""
    if err is None:
        return None
    if err.stack:
        return err.stack
    if err.name and err.message:
        return f"{err.name}: {err.message}"
    return err.message or err.name


def error_detail(err: ErrorInfo | None) -> ErrorDetail | None:
    if err is None:
        return None
    return ErrorDetail(
        name=err.name,
        message=err.message,
        stack=stack_without_message(err.stack) if err.stack else None,
        code_frame=err.code_frame,
    )


def normalize_attempt(attempt: AttemptSnapshot | TestRecord) -> AttemptResult:
    return AttemptResult(
        state=attempt.state,
        error=error_detail(attempt.err),
        timings=attempt.timings,
        failed_from_hook_id=attempt.failed_from_hook_id,
        wall_clock_started_at=attempt.wall_clock_started_at,
        wall_clock_duration=attempt.wall_clock_duration,
        video_timestamp=None,
    )


def normalize_test(test: TestRecord) -> TestResult:
    """Render a test with its prior attempts followed by the live one."""
    return TestResult(
        test_id=test.id,
        title=title_path(test),
        state=test.state,
        body=test.body,
        display_error=display_error(test.err),
        attempts=[normalize_attempt(a) for a in [*test.prev_attempts, test]],
    )


def normalize_hook(hook: HookRecord) -> HookResult:
    return HookResult(
        hook_id=hook.hook_id,
        hook_name=hook.hook_name,
        title=title_path(hook),
        body=hook.body,
    )


def normalize_suite(suite: SuiteRecord) -> SuiteResult:
    return SuiteResult(suite_id=suite.id, title=title_path(suite), file=suite.file)


class ResultProjector:
    """Read-only projection of a registry; safe to call repeatedly mid-run."""

    def __init__(
        self,
        registry: RunnableRegistry,
        stats: RunStatistics,
        reporter_name: str,
    ) -> None:
        self._registry = registry
        self._stats = stats
        self._reporter_name = reporter_name

    def project(self) -> RunResult:
        tests = [normalize_test(t) for t in self._registry.tests()]
        hooks = [normalize_hook(h) for h in self._registry.hooks()]
        suites = [normalize_suite(s) for s in self._registry.suites() if not s.root]
        result = RunResult(
            stats=self._stats.summarize(tests, suite_count=len(suites)),
            reporter=self._reporter_name,
            tests=tests,
            hooks=hooks,
            suites=suites,
        )
        logger.debug(
            "results_projected",
            tests=result.stats.tests,
            failures=result.stats.failures,
            hooks=len(hooks),
        )
        return result


def set_video_timestamp(video_start: Any, tests: Iterable[TestResult]) -> list[TestResult]:
    """Return copies of ``tests`` whose attempts carry their offset into the video.

    Attempts without a wall-clock start keep ``video_timestamp`` unset.
    """
    started = parse_timestamp(video_start)
    enriched: list[TestResult] = []
    for test in tests:
        attempts = [
            attempt.model_copy(
                update={
                    "video_timestamp": millis_between(started, attempt.wall_clock_started_at)
                }
            )
            if started is not None and attempt.wall_clock_started_at is not None
            else attempt
            for attempt in test.attempts
        ]
        enriched.append(test.model_copy(update={"attempts": attempts}))
    return enriched
