"""Run statistics derived from projected tests and run timestamps."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from runreporter.models.results import RunStats
from runreporter.types import TestState
from runreporter.utils.timestamps import millis_between

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from runreporter.models.results import TestResult


class RunStatistics:
    """Wall-clock bounds of a run plus counters computed at projection time.

    Counts are recomputed from terminal test states on every summary, so a
    retried test is counted once and repeated projections agree.
    """

    def __init__(self) -> None:
        self.wall_clock_started_at: datetime | None = None
        self.wall_clock_ended_at: datetime | None = None

    def record_start(self, started_at: datetime | None) -> None:
        if started_at is not None:
            self.wall_clock_started_at = started_at

    def record_end(self, ended_at: datetime | None) -> None:
        if ended_at is not None:
            self.wall_clock_ended_at = ended_at

    @property
    def wall_clock_duration(self) -> int:
        return millis_between(self.wall_clock_started_at, self.wall_clock_ended_at)

    def summarize(self, tests: Sequence[TestResult], suite_count: int) -> RunStats:
        states = Counter(t.state for t in tests)
        return RunStats(
            suites=suite_count,
            tests=len(tests),
            passes=states[TestState.PASSED],
            pending=states[TestState.PENDING],
            skipped=states[TestState.SKIPPED],
            failures=states[TestState.FAILED],
            wall_clock_started_at=self.wall_clock_started_at,
            wall_clock_ended_at=self.wall_clock_ended_at,
            wall_clock_duration=self.wall_clock_duration,
        )
